"""`sideko generate`: stateless SDK generation from a standalone OpenAPI spec."""

from __future__ import annotations

from pathlib import Path

import typer

from cli.common import authenticated_client, console, print_success, run_async
from core.domain.language import SdkLanguage
from core.services import sdk_service
from core.validators import validate_file_json_yaml


def generate(
    spec: Path = typer.Argument(
        ...,
        callback=validate_file_json_yaml,
        help="Path to the OpenAPI specification (.json, .yaml, .yml).",
    ),
    language: SdkLanguage = typer.Argument(..., case_sensitive=False, help="Programming language to generate."),
    output: Path = typer.Argument(Path("."), help="Directory (or file path) to save the SDK archive to."),
    name: str | None = typer.Option(None, "--name", help="Display name for the spec. Defaults to the file name."),
    extract: bool = typer.Option(False, "--extract", help="Unpack the archive into the output directory."),
) -> None:
    """Generate an SDK from an OpenAPI spec and save the archive."""

    async def _flow() -> Path:
        async with authenticated_client() as client:
            with console.status(f"🪄  Generating {language.label()} SDK {language.emoji()}...", spinner="circle"):
                return await sdk_service.generate_stateless(
                    client=client,
                    spec_path=spec,
                    language=language,
                    output=output,
                    name=name,
                    extract=extract,
                )

    dest = run_async(_flow())
    print_success("🚀 SDK generated!")
    console.print(f"💾 Saved to {dest}")
