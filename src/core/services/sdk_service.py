"""SDK generation flows.

Each function wraps one CLI command's end-to-end flow: read inputs, call the
Sideko API, then write, unpack or apply what comes back. They return plain
values and leave printing/spinners to the CLI layer.
"""

from __future__ import annotations

import logging
import tempfile
import time
from pathlib import Path

from adapters.archive import ARCHIVE_SUFFIX, save_archive, tar_directory, unpack_archive
from adapters.git_repo import apply_patch, ensure_git_root, read_sdk_id
from adapters.sideko_api import SidekoClient
from core.domain.language import SdkLanguage
from core.domain.models import SdkGenerateRequest, SdkUpdateRequest, StatelessGenerateRequest
from core.errors import CliError


logger = logging.getLogger(__name__)


def sanitize_name_for_filename(value: str) -> str:
    """Generate a filesystem-friendly slug for archive names."""

    out: list[str] = []
    for ch in value.strip():
        if ch.isalnum() or ch in ("-", "_", "."):
            out.append(ch)
        else:
            out.append("-")
    cleaned = "".join(out).strip("-_.")
    return cleaned or "sdk"


async def generate_stateless(
    *,
    client: SidekoClient,
    spec_path: Path,
    language: SdkLanguage,
    output: Path,
    name: str | None = None,
    extract: bool = False,
) -> Path:
    """Upload a standalone OpenAPI spec and save (or unpack) the generated SDK."""

    try:
        request = StatelessGenerateRequest.from_path(spec_path, language=language, name=name)
    except OSError as exc:
        raise CliError(f"Failed reading spec from path: {spec_path}", debug=exc) from exc
    except ValueError as exc:
        raise CliError(str(exc)) from exc

    start = time.monotonic()
    archive = await client.stateless_generate(request)
    logger.debug("Generation took %.1fs", time.monotonic() - start)

    if extract:
        return unpack_archive(archive=archive, dest=output)
    default_name = f"{sanitize_name_for_filename(request.name)}-{language.value}{ARCHIVE_SUFFIX}"
    return save_archive(archive=archive, output=output, default_name=default_name)


async def create_sdk(*, client: SidekoClient, request: SdkGenerateRequest, output: Path) -> Path:
    """Generate an SDK from a config and unpack it into `output`."""

    start = time.monotonic()
    archive = await client.generate_sdk(request)
    logger.debug("Generation took %.1fs", time.monotonic() - start)
    return unpack_archive(archive=archive, dest=output)


async def update_sdk(
    *,
    client: SidekoClient,
    config: Path,
    repo: Path,
    version: str,
    api_version: str = "latest",
) -> bool:
    """Update an existing SDK repo in place.

    Returns False when the service reports nothing to update.
    """

    git_dir = ensure_git_root(repo)
    prev_sdk_id = read_sdk_id(repo)

    with tempfile.TemporaryDirectory(prefix="sideko-") as tmp:
        logger.debug("Created temp directory %s", tmp)
        git_archive = tar_directory(source=git_dir, into=Path(tmp) / "git.tar.gz")

        start = time.monotonic()
        patch = await client.update_sdk(
            SdkUpdateRequest(
                config=config,
                prev_sdk_git=git_archive,
                prev_sdk_id=prev_sdk_id,
                sdk_version=version,
                api_version=api_version,
            )
        )
        logger.debug("Update generation took %.1fs", time.monotonic() - start)

    if not patch.strip():
        logger.warning("No updates to apply")
        return False

    apply_patch(repo, patch)
    return True


def _write_config(content: bytes, output: Path) -> Path:
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(content)
    except OSError as exc:
        raise CliError(f"Failed writing sdk config to {output}", debug=exc) from exc
    return output


async def init_config(*, client: SidekoClient, api_name: str, api_version: str, output: Path) -> Path:
    content = await client.init_sdk_config(api_name=api_name, api_version=api_version)
    return _write_config(content, output)


async def sync_config(*, client: SidekoClient, config: Path, api_version: str) -> Path:
    """Refresh `config` against the given API version, overwriting it in place."""

    content = await client.sync_sdk_config(config=config, api_version=api_version)
    return _write_config(content, config)
