"""`sideko api ...`"""

from __future__ import annotations

import json

import typer

from cli.common import authenticated_client, console, run_async
from cli.ui_components import build_apis_table
from core.domain.models import Api

app = typer.Typer(no_args_is_help=True, help="Manage APIs registered in Sideko.")


@app.command("list")
def list_apis(
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON instead of a table."),
) -> None:
    """List all APIs."""

    async def _flow() -> list[Api]:
        async with authenticated_client() as client:
            return await client.list_apis()

    apis = run_async(_flow())
    if as_json:
        typer.echo(json.dumps([a.model_dump(mode="json") for a in apis], ensure_ascii=False, indent=2))
        return
    console.print(build_apis_table(apis))
