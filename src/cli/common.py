"""Helpers compartidos por los comandos.

- `build_client`: único punto donde la CLI crea un `SidekoClient` (los tests lo
  sustituyen para inyectar un transporte falso).
- `run_async`: ejecuta el flujo asíncrono y convierte `CliError` en exit code 1.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine, TypeVar

import typer
from rich.console import Console

from adapters.sideko_api import SidekoClient
from core.config import AppSettings, load_settings, require_api_key
from core.errors import CliError


logger = logging.getLogger("sideko")

console = Console()

T = TypeVar("T")


def build_client(settings: AppSettings, *, api_key: str | None = None) -> SidekoClient:
    return SidekoClient(settings, api_key=api_key)


def authenticated_client(settings: AppSettings | None = None) -> SidekoClient:
    settings = settings or load_settings()
    return build_client(settings, api_key=require_api_key(settings))


def report_error(exc: CliError) -> None:
    logger.error(exc.message)
    if exc.debug:
        logger.debug(exc.debug)


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    try:
        return asyncio.run(coro)
    except CliError as exc:
        report_error(exc)
        raise typer.Exit(code=1) from exc


def print_success(message: str) -> None:
    console.print(f"[green]✔[/green] {message}")
