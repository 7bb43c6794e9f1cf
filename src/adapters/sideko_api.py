"""Cliente de la API REST de Sideko.

Responsabilidad:
- Traducir requests del dominio a llamadas HTTP (JSON o multipart).
- Traducir respuestas/errores HTTP a modelos del dominio y `CliError`.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from adapters.http_client import build_async_client, extract_filename
from core.config import AppSettings
from core.domain.models import (
    Api,
    CliUpdate,
    Deployment,
    DeploymentTarget,
    DocProject,
    DownloadedArchive,
    LoginUrl,
    SdkGenerateRequest,
    SdkUpdateRequest,
    StatelessGenerateRequest,
)
from core.errors import ApiError, AuthError, CliError


logger = logging.getLogger(__name__)

_YAML_MIME = "application/x-yaml"


def _server_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text[:500] or None
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return None


def raise_for_api_status(response: httpx.Response) -> None:
    if response.is_success:
        return

    status = response.status_code
    detail = _server_message(response)
    debug = f"{response.request.method} {response.request.url} -> HTTP {status}: {detail or '<empty body>'}"
    if status in (401, 403):
        raise AuthError(
            "Sideko API rejected the API key. Run `sideko login` to refresh it",
            debug=debug,
            status_code=status,
        )
    message = f"Sideko API request failed (HTTP {status})"
    if detail:
        message = f"{message}: {detail}"
    raise ApiError(message, debug=debug, status_code=status)


def _read_upload(path: Path, *, what: str) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise CliError(f"Failed reading {what} from path: {path}", debug=exc) from exc


class SidekoClient:
    """Cliente asíncrono. Usar como `async with SidekoClient(settings) as client:`."""

    def __init__(
        self,
        settings: AppSettings,
        *,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = build_async_client(settings, api_key=api_key, transport=transport)

    async def __aenter__(self) -> "SidekoClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        start = time.monotonic()
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiError("Failed connecting to Sideko API", debug=f"{type(exc).__name__}: {exc}") from exc
        logger.debug(
            "%s %s -> %s (%.2fs, %d bytes)",
            method,
            response.request.url,
            response.status_code,
            time.monotonic() - start,
            len(response.content),
        )
        raise_for_api_status(response)
        return response

    @staticmethod
    def _parse(response: httpx.Response, adapter: TypeAdapter[Any]) -> Any:
        try:
            return adapter.validate_python(response.json())
        except (ValueError, ValidationError) as exc:
            raise ApiError("Unexpected response from Sideko API", debug=exc) from exc

    # ------------- SDK -------------

    async def stateless_generate(self, request: StatelessGenerateRequest) -> DownloadedArchive:
        data = {
            "extension": request.extension,
            "language": request.language.value,
            "name": request.name,
        }
        files = {"file": (f"{request.name}.{request.extension}", request.file, "application/octet-stream")}
        response = await self._request("POST", "/sdk/generate/", data=data, files=files)
        return DownloadedArchive(content=response.content, filename=extract_filename(response))

    async def generate_sdk(self, request: SdkGenerateRequest) -> DownloadedArchive:
        config = _read_upload(request.config, what="config")
        data = {
            "language": request.language.value,
            "sdk_version": request.sdk_version,
            "api_version": request.api_version,
            "github_actions": "true" if request.github_actions else "false",
        }
        files = {"config": (request.config.name, config, _YAML_MIME)}
        response = await self._request("POST", "/sdk/create", data=data, files=files)
        return DownloadedArchive(content=response.content, filename=extract_filename(response))

    async def update_sdk(self, request: SdkUpdateRequest) -> bytes:
        config = _read_upload(request.config, what="config")
        prev_sdk_git = _read_upload(request.prev_sdk_git, what="git archive")
        data = {
            "prev_sdk_id": request.prev_sdk_id,
            "sdk_version": request.sdk_version,
            "api_version": request.api_version,
        }
        files = {
            "config": (request.config.name, config, _YAML_MIME),
            "prev_sdk_git": (request.prev_sdk_git.name, prev_sdk_git, "application/gzip"),
        }
        response = await self._request("POST", "/sdk/update", data=data, files=files)
        return response.content

    async def init_sdk_config(self, *, api_name: str, api_version: str = "latest") -> bytes:
        payload = {"api_name": api_name, "api_version": api_version}
        response = await self._request("POST", "/sdk/config/init", json=payload)
        return response.content

    async def sync_sdk_config(self, *, config: Path, api_version: str = "latest") -> bytes:
        files = {"config": (config.name, _read_upload(config, what="config"), _YAML_MIME)}
        response = await self._request("POST", "/sdk/config/sync", data={"api_version": api_version}, files=files)
        return response.content

    # ------------- API -------------

    async def list_apis(self) -> list[Api]:
        response = await self._request("GET", "/api")
        return self._parse(response, TypeAdapter(list[Api]))

    # ------------- DOCS -------------

    async def list_doc_projects(self) -> list[DocProject]:
        response = await self._request("GET", "/doc_project")
        return self._parse(response, TypeAdapter(list[DocProject]))

    async def trigger_deployment(self, *, doc_name: str, target: DeploymentTarget) -> Deployment:
        response = await self._request(
            "POST",
            f"/doc_project/{doc_name}/deployment",
            json={"target": target.value},
        )
        return self._parse(response, TypeAdapter(Deployment))

    async def get_deployment(self, *, doc_name: str, deployment_id: str) -> Deployment:
        response = await self._request("GET", f"/doc_project/{doc_name}/deployment/{deployment_id}")
        return self._parse(response, TypeAdapter(Deployment))

    # ------------- AUTH / CLI -------------

    async def get_login_url(self, *, cli_output: str | None = None, cli_port: int | None = None) -> LoginUrl:
        params: dict[str, str | int] = {}
        if cli_output is not None:
            params["cli_output"] = cli_output
        if cli_port is not None:
            params["cli_port"] = cli_port
        response = await self._request("GET", "/auth/login_url", params=params)
        return self._parse(response, TypeAdapter(LoginUrl))

    async def check_cli_updates(self, *, cli_version: str) -> list[CliUpdate]:
        response = await self._request("GET", f"/cli/updates/{cli_version}")
        return self._parse(response, TypeAdapter(list[CliUpdate]))

    async def whoami(self) -> dict[str, Any]:
        response = await self._request("GET", "/user/me")
        return self._parse(response, TypeAdapter(dict[str, Any]))
