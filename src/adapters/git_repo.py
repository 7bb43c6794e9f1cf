"""Operaciones git sobre el repo de un SDK generado (vía el ejecutable `git`)."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path

from pydantic import ValidationError

from core.domain.models import SdkMetadata
from core.errors import GitError


logger = logging.getLogger(__name__)

SDK_METADATA_FILENAME = ".sdk.json"
PATCH_FILENAME = "sdk_update.patch"

_NOT_A_SDK = "Could not determine SDK ID of the repository. Is this a Sideko SDK?"


def _run_git(repo: Path, *args: str, missing_git_msg: str) -> subprocess.CompletedProcess[str]:
    try:
        return subprocess.run(
            ["git", *args],
            cwd=repo,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise GitError(missing_git_msg, debug=repr(exc)) from exc


def _describe(cmd: str, proc: subprocess.CompletedProcess[str]) -> str:
    return f"`{cmd}` failure (exit status {proc.returncode})\nstdout:\n{proc.stdout}\nstderr:\n{proc.stderr}"


def ensure_git_root(repo: Path) -> Path:
    """Valida que `repo` sea la raíz de un repo git limpio y devuelve su `.git`."""

    git_dir = repo / ".git"
    if not git_dir.is_dir():
        raise GitError(f"Path is not the root of a git repository, {git_dir} not present")

    status = _run_git(
        repo,
        "status",
        "--porcelain",
        missing_git_msg="Failed to check git status, is `git` installed?",
    )
    if status.returncode != 0:
        raise GitError("Failed to check git status", debug=_describe("git status", status))
    if status.stdout.strip():
        raise GitError(
            "Git working directory is not clean. Please commit or stash your changes before updating",
            debug=_describe("git status", status),
        )
    return git_dir


def read_sdk_id(repo: Path) -> str:
    """Lee el ID del SDK desde `.sdk.json` en la raíz del repo."""

    md_path = repo / SDK_METADATA_FILENAME
    if not md_path.is_file():
        raise GitError(_NOT_A_SDK, debug=f"SDK metadata path does not exist in repo: {md_path}")

    try:
        md_str = md_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise GitError(_NOT_A_SDK, debug=f"Unable to read SDK metadata path {md_path}: {exc!r}") from exc
    logger.debug("Found sdk metadata: %s", md_str)

    try:
        metadata = SdkMetadata.model_validate(json.loads(md_str))
    except (ValueError, ValidationError) as exc:
        raise GitError(_NOT_A_SDK, debug=f"Unable to deserialize SDK metadata {md_path}: {exc!r}") from exc
    return metadata.id


def apply_patch(repo: Path, patch: bytes) -> None:
    """Escribe el patch en el repo y lo aplica con `git apply`.

    El archivo del patch solo se elimina si se aplicó; si falla queda en el repo
    para inspección manual.
    """

    patch_path = repo / PATCH_FILENAME
    try:
        patch_path.write_bytes(patch)
    except OSError as exc:
        raise GitError("Failed writing sdk git patch file", debug=repr(exc)) from exc

    proc = _run_git(
        repo,
        "apply",
        PATCH_FILENAME,
        missing_git_msg="Failed to run git patch, is `git` installed?",
    )
    if proc.returncode != 0:
        raise GitError("Failed to apply update", debug=_describe("git apply", proc))

    patch_path.unlink(missing_ok=True)
