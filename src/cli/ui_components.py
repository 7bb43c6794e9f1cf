"""Componentes de UI para CLI (Rich).

Tablas y paneles reutilizables; los comandos solo deciden qué mostrar.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Api, CliUpdate, CliUpdateSeverity, Deployment, DeploymentStatus, DocProject
from core.version import __version__


def print_banner(console: Console) -> None:
    """Banner del modo interactivo (`sideko sdk init`)."""

    title = Text("Sideko", style="bold magenta")
    subtitle = Text(f"SDK generation • v{__version__}", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="magenta", padding=(1, 4)))


def build_apis_table(apis: list[Api]) -> Table:
    table = Table(title="APIs")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Versions", style="white", justify="right")
    table.add_column("URL", style="magenta")
    table.add_column("ID", style="dim")
    table.add_column("Created At", style="dim")
    for api in apis:
        table.add_row(api.name, str(api.version_count), api.url or "-", api.id, api.created_at)
    return table


def build_doc_projects_table(projects: list[DocProject]) -> Table:
    table = Table(title="Documentation Projects")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Version", style="white")
    table.add_column("Preview", style="magenta")
    table.add_column("Production", style="magenta")
    table.add_column("ID", style="dim")
    for project in projects:
        table.add_row(
            project.name,
            project.title,
            project.current_version or "-",
            project.preview_domain or "-",
            project.production_domain or "-",
            project.id,
        )
    return table


_STATUS_STYLES: dict[DeploymentStatus, str] = {
    DeploymentStatus.GENERATED: "dim",
    DeploymentStatus.BUILDING: "yellow",
    DeploymentStatus.COMPLETE: "green",
    DeploymentStatus.ERROR: "red",
    DeploymentStatus.CANCELLED: "red",
}


def format_deployment(deployment: Deployment) -> Text:
    text = Text(f"{deployment.target.value} deployment {deployment.id}: ")
    text.append(deployment.status.value, style=_STATUS_STYLES[deployment.status])
    return text


def build_updates_panel(updates: list[CliUpdate]) -> Panel:
    required = any(u.severity is CliUpdateSeverity.REQUIRED for u in updates)
    body = Text()
    for update in updates:
        style = "bold red" if update.severity is CliUpdateSeverity.REQUIRED else "yellow"
        body.append(f"[{update.severity.value}] ", style=style)
        body.append(update.message + "\n")
    return Panel(
        body,
        title=Text("CLI updates", style="bold"),
        border_style="red" if required else "yellow",
    )
