"""`sideko login`: store an API key in the OS keyring or user config."""

from __future__ import annotations

import typer

from cli import common
from cli.common import console, print_success, run_async
from core.config import load_settings
from core.services.auth_service import login as login_flow


def _open_url(url: str) -> None:
    console.print(f"Open this URL to get your API key: [magenta]{url}[/magenta]")
    typer.launch(url)


def login(
    key: str | None = typer.Option(None, "--key", help="API key to store. Skips the browser flow."),
) -> None:
    """Authenticate the CLI with Sideko."""

    async def _flow() -> str:
        settings = load_settings()
        return await login_flow(
            make_client=lambda api_key: common.build_client(settings, api_key=api_key),
            prompt_key=lambda: typer.prompt("API key", hide_input=True),
            open_url=_open_url,
            key=key,
        )

    location = run_async(_flow())
    print_success(f"Saved API key to: {location}")
