"""`sideko sdk ...`: config based SDK generation and updates."""

from __future__ import annotations

from pathlib import Path

import typer

from cli.common import authenticated_client, console, print_success, run_async
from cli.ui_components import print_banner
from core.config import AppSettings, load_settings
from core.domain.language import SdkLanguage
from core.domain.models import SdkGenerateRequest
from core.services import sdk_service
from core.validators import (
    validate_api_version,
    validate_dir,
    validate_dir_allow_dne,
    validate_file_allow_dne,
    validate_file_yaml,
    validate_semver,
    validate_version_or_bump,
)

app = typer.Typer(no_args_is_help=True, help="Create and update SDKs.")
config_app = typer.Typer(no_args_is_help=True, help="Manage SDK configs.")
app.add_typer(config_app, name="config")


async def _create(request: SdkGenerateRequest, output: Path, settings: AppSettings | None = None) -> Path:
    async with authenticated_client(settings) as client:
        lang = request.language
        with console.status(f"🪄  Generating {lang.label()} SDK {lang.emoji()}...", spinner="circle"):
            return await sdk_service.create_sdk(client=client, request=request, output=output)


@app.command()
def create(
    config: Path = typer.Option(..., "--config", callback=validate_file_yaml, help="Path to SDK config."),
    lang: SdkLanguage = typer.Option(..., "--lang", case_sensitive=False, help="Programming language to generate."),
    version: str = typer.Option("0.1.0", "--version", callback=validate_semver, help="Semantic version of generated SDK."),
    api_version: str = typer.Option(
        "latest",
        "--api-version",
        callback=validate_api_version,
        help="Generate the SDK for a specific version of the API listed in the config (e.g. `2.1.5`).",
    ),
    gh_actions: bool = typer.Option(
        False,
        "--gh-actions",
        help="Include GitHub actions for testing and publishing the SDK.",
    ),
    output: Path = typer.Option(Path("./"), "--output", callback=validate_dir_allow_dne, help="Path to save SDK."),
) -> None:
    """Create a new SDK."""

    request = SdkGenerateRequest(
        config=config,
        language=lang,
        sdk_version=version,
        api_version=api_version,
        github_actions=gh_actions,
    )
    dest = run_async(_create(request, output))
    print_success("🚀 SDK generated!")
    console.print(f"💾 Saved to {dest}")


@app.command()
def update(
    config: Path = typer.Option(..., "--config", callback=validate_file_yaml, help="Path to SDK config."),
    repo: Path = typer.Option(..., "--repo", callback=validate_dir, help="Path to root of SDK repo."),
    version: str = typer.Option(
        ...,
        "--version",
        callback=validate_version_or_bump,
        help="Semantic version of generated SDK (e.g. `2.1.5`) or version bump (`patch`, `minor`, `major`, `rc`).",
    ),
    api_version: str = typer.Option(
        "latest",
        "--api-version",
        callback=validate_api_version,
        help="API version to update SDK with (e.g. `2.1.5`).",
    ),
) -> None:
    """Sync an existing SDK with the latest API specification."""

    async def _flow() -> bool:
        async with authenticated_client() as client:
            with console.status("🪄  Updating SDK...", spinner="circle"):
                return await sdk_service.update_sdk(
                    client=client,
                    config=config,
                    repo=repo,
                    version=version,
                    api_version=api_version,
                )

    if run_async(_flow()):
        print_success("🚀 Update applied!")


def _parse_languages(raw: str) -> list[SdkLanguage]:
    languages: list[SdkLanguage] = []
    for part in raw.split(","):
        value = part.strip().lower()
        if not value:
            continue
        try:
            lang = SdkLanguage(value)
        except ValueError:
            choices = ", ".join(lang.value for lang in SdkLanguage)
            raise typer.BadParameter(f"Unknown language `{value}`, choose from: {choices}") from None
        if lang not in languages:
            languages.append(lang)
    if not languages:
        raise typer.BadParameter("At least one language is required")
    return languages


@app.command()
def init() -> None:
    """Interactively configure and create SDKs."""

    print_banner(console)

    config = validate_file_yaml(Path(typer.prompt("SDK config path", default="sdk-config.yaml").strip()))
    languages = _parse_languages(typer.prompt("Languages (comma separated)", default=SdkLanguage.default().value))
    version = validate_semver(typer.prompt("SDK version", default="0.1.0"))
    output = validate_dir_allow_dne(Path(typer.prompt("Output directory", default="./").strip()))
    gh_actions = typer.confirm("Include GitHub actions?", default=False)
    settings = load_settings()

    for lang in languages:
        request = SdkGenerateRequest(
            config=config,
            language=lang,
            sdk_version=version,
            github_actions=gh_actions,
        )
        dest = run_async(_create(request, output, settings))
        print_success(f"{lang.emoji()} {lang.label()} SDK generated!")
        console.print(f"💾 Saved to {dest}")


@config_app.command("init")
def config_init(
    api_name: str = typer.Option(..., "--api-name", help="Name of the API registered in Sideko."),
    api_version: str = typer.Option("latest", "--api-version", callback=validate_api_version),
    output: Path = typer.Option(
        Path("sdk-config.yaml"),
        "--output",
        callback=validate_file_allow_dne,
        help="Where to write the config.",
    ),
) -> None:
    """Generate a default SDK config for an API."""

    async def _flow() -> Path:
        async with authenticated_client() as client:
            return await sdk_service.init_config(
                client=client,
                api_name=api_name,
                api_version=api_version,
                output=output,
            )

    dest = run_async(_flow())
    print_success(f"Config written to {dest}")


@config_app.command("sync")
def config_sync(
    config: Path = typer.Option(..., "--config", callback=validate_file_yaml, help="Path to SDK config."),
    api_version: str = typer.Option("latest", "--api-version", callback=validate_api_version),
) -> None:
    """Refresh an SDK config against the API specification."""

    async def _flow() -> Path:
        async with authenticated_client() as client:
            return await sdk_service.sync_config(client=client, config=config, api_version=api_version)

    dest = run_async(_flow())
    print_success(f"Config synced: {dest}")
