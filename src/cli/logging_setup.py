"""Logging de la CLI con `rich.logging.RichHandler` (a stderr)."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def resolve_level(*, verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(level: int = logging.INFO) -> None:
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=level <= logging.DEBUG,
        show_path=level <= logging.DEBUG,
        markup=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # httpx loguea cada request en INFO.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    logging.getLogger("httpcore").setLevel(max(level, logging.WARNING))
