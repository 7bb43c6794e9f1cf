"""Entry point de la CLI (`sideko`)."""

from __future__ import annotations

import logging
import sys

import typer

from cli import api, doc, sdk
from cli.common import report_error
from cli.doctor import doctor
from cli.generate import generate
from cli.logging_setup import resolve_level, setup_logging
from cli.login import login
from core.errors import CliError
from core.version import __version__

app = typer.Typer(
    name="sideko",
    no_args_is_help=True,
    help="Generate SDKs and documentation from OpenAPI specifications.",
)

app.command()(generate)
app.command()(login)
app.command()(doctor)
app.add_typer(sdk.app, name="sdk")
app.add_typer(api.app, name="api")
app.add_typer(doc.app, name="doc")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"sideko {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show warnings and errors."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print the CLI version and exit.",
    ),
) -> None:
    setup_logging(resolve_level(verbose=verbose, quiet=quiet))


def run() -> None:
    # Las salidas usan emojis; en terminales Windows (cp1252) fallarían.
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")

    try:
        app()
    except CliError as exc:
        report_error(exc)
        sys.exit(1)
    except KeyboardInterrupt:
        logging.getLogger("sideko").warning("Interrupted")
        sys.exit(130)
