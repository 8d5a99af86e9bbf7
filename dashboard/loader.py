"""Fetch the dashboard's data from the gateway and turn it into a view."""

import asyncio
import logging
from typing import Any

import httpx

import config
from dashboard.view import ERROR_MESSAGE, DashboardView, build_view, error_view

logger = logging.getLogger(__name__)


class DashboardError(Exception):
    """The gateway answered with a non-success status."""


def gateway_client(
    base_url: str = config.DASHBOARD_API_URL,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=base_url, timeout=config.DASHBOARD_TIMEOUT, transport=transport)


async def fetch_api(client: httpx.AsyncClient, endpoint: str) -> Any:
    r = await client.get(endpoint)
    if not r.is_success:
        raise DashboardError(f"API error: {r.status_code}")
    return r.json()


async def fetch_dashboard_data(client: httpx.AsyncClient) -> tuple[Any, Any]:
    """Request user and playlists concurrently; both must succeed."""
    results = await asyncio.gather(
        fetch_api(client, "/api/user"),
        fetch_api(client, "/api/playlists"),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    user, playlists = results
    return user, playlists


async def load_dashboard(client: httpx.AsyncClient) -> DashboardView:
    """Whole load sequence. Any failure yields the error view; the cause only goes to the log."""
    try:
        user, playlists = await fetch_dashboard_data(client)
        return build_view(user, playlists)
    except Exception as e:
        logger.error("Failed to load dashboard: %r", e)
        return error_view(ERROR_MESSAGE)
