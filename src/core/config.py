"""Configuración del Core.

- Variables de entorno `SIDEKO_*` tipadas con pydantic-settings.
- Config de usuario en un archivo dotenv (`$HOME/.sideko` o `$SIDEKO_CONFIG_PATH`)
  que `sideko login` escribe y que los comandos leen.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import keyring
from dotenv import dotenv_values, set_key
from keyring.errors import KeyringError
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import AuthError, ConfigError
from core.version import __version__


logger = logging.getLogger(__name__)

ENV_CONFIG_PATH = "SIDEKO_CONFIG_PATH"
ENV_API_KEY = "SIDEKO_API_KEY"
ENV_BASE_URL = "SIDEKO_BASE_URL"

DEFAULT_BASE_URL = "https://api.sideko.dev/v1"

KEYRING_SERVICE = "sideko"


def get_default_config_path() -> Path:
    home = os.environ.get("HOME")
    if not home:
        raise ConfigError("Unable to build default config path: $HOME is not set")
    return Path(home) / ".sideko"


def get_config_path() -> Path:
    """Ruta del dotenv de usuario: `$SIDEKO_CONFIG_PATH` o `$HOME/.sideko`."""

    if ENV_CONFIG_PATH in os.environ:
        raw = os.environ[ENV_CONFIG_PATH].strip()
        if not raw:
            raise ConfigError(
                f"Unable to build config path: ${ENV_CONFIG_PATH} is set to an ill-formatted path",
                debug=repr(os.environ[ENV_CONFIG_PATH]),
            )
        return Path(raw).expanduser()
    return get_default_config_path()


def read_user_env_vars() -> dict[str, str]:
    """Lee el dotenv de usuario con el mismo parser que usa pydantic-settings."""

    cfg_path = get_config_path()
    if not cfg_path.exists():
        return {}
    try:
        values = dotenv_values(cfg_path, encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed loading sideko config: {cfg_path}", debug=exc) from exc
    return {k: v for k, v in values.items() if v is not None}


def write_user_env_vars(values: dict[str, str | None]) -> Path:
    """Escribe/actualiza variables en el dotenv de usuario.

    Las líneas `KEY=` existentes se reemplazan en su sitio; el resto del archivo
    (comentarios incluidos) se conserva y las claves nuevas se agregan al final.
    Los valores no alfanuméricos se escriben entre comillas simples.
    """

    cfg_path = get_config_path()
    updates = {k: v for k, v in values.items() if v is not None}

    try:
        cfg_path.parent.mkdir(parents=True, exist_ok=True)
        for key, value in updates.items():
            set_key(cfg_path, key, value, quote_mode="auto", encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed updating sideko config: {cfg_path}", debug=exc) from exc

    logger.debug("Set dotenv config %s: %s", ", ".join(sorted(updates)), cfg_path)
    return cfg_path


def get_keyring_api_key() -> str | None:
    """API key guardada en el keyring del sistema (o None)."""

    try:
        return keyring.get_password(KEYRING_SERVICE, ENV_API_KEY)
    except KeyringError as exc:
        logger.warning("Failed retrieving keyring entry %s", ENV_API_KEY)
        logger.debug("%r", exc)
        return None


def store_api_key(key: str) -> str:
    """Guarda la API key en el keyring; si no hay keyring usable, en el dotenv.

    Devuelve una descripción de dónde quedó guardada.
    """

    try:
        keyring.set_password(KEYRING_SERVICE, ENV_API_KEY, key)
    except KeyringError as exc:
        logger.warning("Failed setting keyring entry %s, saving it to the config file instead", ENV_API_KEY)
        logger.debug("%r", exc)
        return str(write_user_env_vars({ENV_API_KEY: key}))
    logger.debug("Set keyring entry %s", ENV_API_KEY)
    return "OS keyring"


class AppSettings(BaseSettings):
    """Configuración central de la CLI."""

    model_config = SettingsConfigDict(
        env_prefix="SIDEKO_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    api_key: str | None = Field(
        default=None,
        description="API key de Sideko (x-sideko-key).",
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        min_length=8,
        description="Base URL de la API de Sideko.",
    )
    http_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Timeout por request (segundos). La generación puede tardar.",
    )
    user_agent: str = Field(
        default=f"sideko-cli/{__version__}",
        min_length=1,
    )
    deploy_poll_interval_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Intervalo de polling del estado de un deployment de docs.",
    )
    deploy_timeout_seconds: float = Field(
        default=600.0,
        gt=0,
        description="Tiempo máximo de espera de un deployment de docs.",
    )

    @field_validator("base_url")
    @classmethod
    def _warn_unversioned_base_url(cls, value: str) -> str:
        value = value.rstrip("/")
        if not value.endswith("/v1"):
            logger.warning("Sideko API base url does not end with `/v1`, this probably means it is wrong")
        return value


def load_settings() -> AppSettings:
    """Instancia `AppSettings` leyendo `.env` del proyecto y luego el dotenv de usuario.

    Las variables de entorno reales siempre tienen prioridad.
    """

    cfg_path = get_config_path()
    env_files: list[Path | str] = [".env"]
    if cfg_path.is_file():
        env_files.append(cfg_path)
        logger.debug("Loaded config: %s", cfg_path)
    return AppSettings(_env_file=tuple(env_files))


def resolve_api_key(settings: AppSettings) -> tuple[str | None, str]:
    """Busca la API key: variable de entorno, keyring del sistema y por último el dotenv.

    Devuelve `(key, origen)`; `key` es None si no hay ninguna.
    """

    env_key = os.environ.get(ENV_API_KEY)
    if env_key:
        logger.debug("Retrieved API key from env")
        return env_key, f"${ENV_API_KEY}"

    keyring_key = get_keyring_api_key()
    if keyring_key:
        logger.debug("Retrieved API key from keyring")
        return keyring_key, "OS keyring"

    if settings.api_key:
        logger.debug("Retrieved API key from config file")
        return settings.api_key, "config file"
    return None, ""


def require_api_key(settings: AppSettings) -> str:
    key, _ = resolve_api_key(settings)
    if key:
        return key
    raise AuthError(
        "No Sideko API key found. Run `sideko login` or set $SIDEKO_API_KEY",
        debug=f"config path: {get_config_path()}",
    )
