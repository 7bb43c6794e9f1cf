"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

from rich.table import Table

from adapters.sideko_api import SidekoClient
from cli import common
from cli.common import console
from cli.ui_components import build_updates_panel
from core.config import (
    DEFAULT_BASE_URL,
    AppSettings,
    get_config_path,
    load_settings,
    resolve_api_key,
)
from core.domain.models import CliUpdate
from core.errors import CliError
from core.version import __version__


async def _check_auth(client: SidekoClient) -> tuple[str, str]:
    try:
        user = await client.whoami()
    except CliError as exc:
        return "FAIL", exc.message
    return "OK", str(user.get("email") or user.get("id") or "authenticated")


async def _check_updates(client: SidekoClient) -> tuple[str, str, list[CliUpdate]]:
    try:
        updates = await client.check_cli_updates(cli_version=__version__)
    except CliError as exc:
        return "FAIL", exc.message, []
    if not updates:
        return "OK", f"v{__version__} is up to date", []
    return "UPDATE", f"{len(updates)} update notice(s)", updates


async def _run_checks(
    settings: AppSettings, api_key: str | None
) -> tuple[tuple[str, str], tuple[str, str, list[CliUpdate]]]:
    async with common.build_client(settings, api_key=api_key) as client:
        auth = await _check_auth(client) if api_key else ("SKIP", "No API key")
        updates = await _check_updates(client)
    return auth, updates


def doctor() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    table = Table(title="Sideko Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    try:
        cfg_path = get_config_path()
        settings = load_settings()
        api_key, key_source = resolve_api_key(settings)
    except CliError as exc:
        table.add_row("Config", "FAIL", exc.message)
        console.print(table)
        return

    table.add_row("Config file", "OK" if cfg_path.is_file() else "MISSING", str(cfg_path))

    # Config
    if api_key:
        table.add_row("API key", "OK", f"from {key_source}")
    else:
        table.add_row("API key", "MISSING", "Run `sideko login`")

    base_status = "OK" if settings.base_url.endswith("/v1") else "WARN"
    base_detail = settings.base_url if settings.base_url != DEFAULT_BASE_URL else f"{settings.base_url} (default)"
    table.add_row("API base URL", base_status, base_detail)

    # Connectivity (best-effort)
    (auth_status, auth_detail), (upd_status, upd_detail, updates) = asyncio.run(_run_checks(settings, api_key))
    table.add_row("Authentication", auth_status, auth_detail)
    table.add_row("CLI version", upd_status, upd_detail)

    console.print(table)

    if updates:
        console.print(build_updates_panel(updates))
    if auth_status == "FAIL":
        console.print("\n[yellow]Note:[/yellow] run `sideko login` to store a fresh API key.")
