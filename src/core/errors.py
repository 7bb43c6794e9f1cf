"""Errores de la CLI.

Todas las fallas esperables (config, red, git, archivos) se elevan como
`CliError` para que `cli.main.run` las muestre sin traceback.
"""

from __future__ import annotations


class CliError(Exception):
    """Error base con mensaje para el usuario y detalle opcional para `--verbose`."""

    def __init__(self, message: str, debug: object | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.debug = None if debug is None else str(debug)

    def __str__(self) -> str:
        return self.message


class ConfigError(CliError):
    pass


class ApiError(CliError):
    def __init__(self, message: str, debug: object | None = None, *, status_code: int | None = None) -> None:
        super().__init__(message, debug)
        self.status_code = status_code


class AuthError(ApiError):
    pass


class ArchiveError(CliError):
    pass


class GitError(CliError):
    pass
