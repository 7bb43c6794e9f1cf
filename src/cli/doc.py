"""`sideko doc ...`: documentation websites."""

from __future__ import annotations

import json

import typer

from cli.common import authenticated_client, console, print_success, run_async
from cli.ui_components import build_doc_projects_table, format_deployment
from core.config import load_settings
from core.domain.models import Deployment, DocProject
from core.services.doc_service import DeployHooks, deploy as deploy_docs

app = typer.Typer(no_args_is_help=True, help="Manage documentation websites.")


@app.command("list")
def list_docs(
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON instead of a table."),
) -> None:
    """List all documentation websites."""

    async def _flow() -> list[DocProject]:
        async with authenticated_client() as client:
            return await client.list_doc_projects()

    projects = run_async(_flow())
    if as_json:
        typer.echo(json.dumps([p.model_dump(mode="json") for p in projects], ensure_ascii=False, indent=2))
        return
    console.print(build_doc_projects_table(projects))


@app.command()
def deploy(
    name: str = typer.Option(..., "--name", help="Name of the documentation project."),
    prod: bool = typer.Option(False, "--prod", help="Deploy to production instead of preview."),
    no_wait: bool = typer.Option(False, "--no-wait", help="Return as soon as the deployment is triggered."),
) -> None:
    """Trigger a documentation website deployment to preview or production."""

    async def _flow() -> Deployment:
        settings = load_settings()
        async with authenticated_client(settings) as client:
            with console.status("🪄  Deploying documentation...", spinner="circle"):
                return await deploy_docs(
                    client=client,
                    doc_name=name,
                    prod=prod,
                    no_wait=no_wait,
                    poll_interval=settings.deploy_poll_interval_seconds,
                    timeout=settings.deploy_timeout_seconds,
                    hooks=DeployHooks(status=lambda d: console.print(format_deployment(d))),
                )

    deployment = run_async(_flow())
    if no_wait:
        print_success(f"Deployment {deployment.id} triggered")
    else:
        print_success("🚀 Deployment complete!")
