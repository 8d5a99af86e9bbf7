"""Spotify Web API reads used by the gateway: current user and their playlists."""

import logging
from typing import Any

import httpx

from proxy.errors import NetworkError, UpstreamAPIError

logger = logging.getLogger(__name__)

API_BASE = "https://api.spotify.com/v1"


async def api_get(
    client: httpx.AsyncClient,
    token: str,
    endpoint: str,
    params: dict[str, str] | None = None,
) -> Any:
    """GET an API endpoint with a bearer token and return the decoded JSON untouched."""
    try:
        r = await client.get(
            f"{API_BASE}{endpoint}",
            params=params,
            headers={"Authorization": f"Bearer {token}"},
        )
    except httpx.RequestError as e:
        raise NetworkError(f"Spotify API request failed: {e}") from e
    if not r.is_success:
        logger.warning("Spotify GET %s: %s %s", endpoint, r.status_code, r.text[:200])
        raise UpstreamAPIError(r.status_code)
    return r.json()


async def get_current_user(client: httpx.AsyncClient, token: str) -> Any:
    return await api_get(client, token, "/me")


async def get_current_user_playlists(
    client: httpx.AsyncClient,
    token: str,
    limit: str = "50",
    offset: str = "0",
) -> Any:
    """One page of /me/playlists. limit/offset are passed through unvalidated."""
    return await api_get(client, token, "/me/playlists", params={"limit": limit, "offset": offset})
