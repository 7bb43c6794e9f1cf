"""Login: obtain a Sideko API key and persist it (OS keyring, else the user config)."""

from __future__ import annotations

import logging
from typing import Callable

from adapters.sideko_api import SidekoClient
from core.config import store_api_key
from core.errors import CliError


logger = logging.getLogger(__name__)


async def login(
    *,
    make_client: Callable[[str], SidekoClient],
    prompt_key: Callable[[], str],
    open_url: Callable[[str], None] | None = None,
    key: str | None = None,
) -> str:
    """Store an API key after checking it against the API.

    `make_client(api_key)` builds a client for the given key ("" for anonymous).
    Without `key` the login page URL is fetched and handed to `open_url`, then
    `prompt_key` is asked for the key the page shows.
    Returns where the key was stored.
    """

    if key is None:
        async with make_client("") as client:
            login_url = await client.get_login_url(cli_output="key")
        if open_url:
            open_url(login_url.url)
        key = prompt_key()

    key = key.strip()
    if not key:
        raise CliError("No API key provided")

    async with make_client(key) as client:
        user = await client.whoami()
    logger.debug("Authenticated as %s", user.get("email") or user.get("id") or "<unknown>")

    return store_api_key(key)
