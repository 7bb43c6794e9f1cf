"""Wrapper de httpx.

Estandariza base URL, timeouts y headers (User-Agent, API key) para todas las
llamadas a la API de Sideko.
"""

from __future__ import annotations

import re
from urllib.parse import unquote

import httpx

from core.config import AppSettings


API_KEY_HEADER = "x-sideko-key"

_FILENAME_STAR_RE = re.compile(r"filename\*\s*=\s*([^']*)'[^']*'([^;]+)", re.IGNORECASE)
_FILENAME_RE = re.compile(r'filename\s*=\s*(?:"([^"]*)"|([^;]+))', re.IGNORECASE)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    api_key: str | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` apuntando a la API de Sideko.

    `transport` permite inyectar un `httpx.MockTransport` en tests.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json, application/octet-stream;q=0.9, */*;q=0.8",
    }
    key = api_key if api_key is not None else settings.api_key
    if key:
        headers[API_KEY_HEADER] = key
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=settings.base_url.rstrip("/") + "/",
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def extract_filename(response: httpx.Response) -> str | None:
    """Nombre de archivo sugerido por `Content-Disposition` (RFC 6266), si existe."""

    disposition = response.headers.get("content-disposition")
    if not disposition:
        return None

    star = _FILENAME_STAR_RE.search(disposition)
    if star:
        encoding = star.group(1).strip() or "utf-8"
        return unquote(star.group(2).strip().strip('"'), encoding=encoding) or None

    plain = _FILENAME_RE.search(disposition)
    if plain:
        value = (plain.group(1) if plain.group(1) is not None else plain.group(2)).strip()
        return value or None
    return None
