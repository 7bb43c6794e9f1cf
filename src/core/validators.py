"""Validadores de argumentos de la CLI.

Se usan como `callback=` de parámetros typer: devuelven el valor normalizado o
elevan `typer.BadParameter` (exit code 2, mensaje junto al uso del comando).
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

import typer

from core.domain.models import VERSION_BUMPS


SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)

JSON_YAML_EXTENSIONS = (".json", ".yml", ".yaml")
YAML_EXTENSIONS = (".yml", ".yaml")


class PathKind(str, Enum):
    FILE = "file"
    DIR = "dir"


def validate_path(raw_path: Path | str | None, kind: PathKind, *, allow_dne: bool) -> Path | None:
    """Valida el tipo de ruta y (opcionalmente) que exista."""

    if raw_path is None:
        return None
    path = Path(raw_path)

    if kind is PathKind.FILE:
        if allow_dne:
            allowed = path.is_file() or not path.exists()
            msg = f"Path `{path}` must be a file or a non-existent path"
        else:
            allowed = path.is_file()
            msg = f"Path `{path}` must be an existing file"
    else:
        if allow_dne:
            allowed = path.is_dir() or not path.exists()
            msg = f"Path `{path}` must be a directory or a non-existent path"
        else:
            allowed = path.is_dir()
            msg = f"Path `{path}` must be an existing directory"

    if not allowed:
        raise typer.BadParameter(msg)
    return path


def _validate_file_with_extension(raw_path: Path | str | None, extensions: tuple[str, ...]) -> Path | None:
    path = validate_path(raw_path, PathKind.FILE, allow_dne=False)
    if path is None:
        return None
    if path.suffix.lower() not in extensions:
        raise typer.BadParameter(f"Path has incorrect extension, only {list(extensions)} are permitted")
    return path


def validate_file(value: Path | None) -> Path | None:
    return validate_path(value, PathKind.FILE, allow_dne=False)


def validate_file_json_yaml(value: Path | None) -> Path | None:
    return _validate_file_with_extension(value, JSON_YAML_EXTENSIONS)


def validate_file_yaml(value: Path | None) -> Path | None:
    return _validate_file_with_extension(value, YAML_EXTENSIONS)


def validate_file_allow_dne(value: Path | None) -> Path | None:
    return validate_path(value, PathKind.FILE, allow_dne=True)


def validate_dir(value: Path | None) -> Path | None:
    return validate_path(value, PathKind.DIR, allow_dne=False)


def validate_dir_allow_dne(value: Path | None) -> Path | None:
    return validate_path(value, PathKind.DIR, allow_dne=True)


def is_semver(value: str) -> bool:
    return bool(SEMVER_RE.match(value.strip()))


def validate_semver(value: str) -> str:
    value = value.strip()
    if not is_semver(value):
        raise typer.BadParameter(f"`{value}` is not a valid semantic version (e.g. `2.1.5`)")
    return value


def validate_api_version(value: str) -> str:
    value = value.strip()
    if value == "latest" or is_semver(value):
        return value
    raise typer.BadParameter(f"`{value}` must be `latest` or a semantic version (e.g. `2.1.5`)")


def validate_version_or_bump(value: str) -> str:
    value = value.strip()
    if value in VERSION_BUMPS or is_semver(value):
        return value
    raise typer.BadParameter(
        f"`{value}` must be a semantic version (e.g. `2.1.5`) or a version bump ({', '.join(VERSION_BUMPS)})"
    )
