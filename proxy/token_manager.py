"""Spotify access tokens for the gateway: refresh-token exchange plus a one-slot cache.

The proxy holds a single long-lived refresh token. Access tokens expire after
an hour, so the gateway keeps the current one in a TokenCache and only goes
back to the accounts service when it is about to run out.
"""

import asyncio
import base64
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

import httpx

import config
from proxy.errors import NetworkError, UpstreamAuthError

logger = logging.getLogger(__name__)

TOKEN_URL = "https://accounts.spotify.com/api/token"
# A cached token with less than this many seconds left is treated as stale.
EXPIRY_MARGIN_SECONDS = 300
DEFAULT_EXPIRES_IN = 3600


@dataclass(frozen=True)
class Credentials:
    client_id: str
    client_secret: str
    refresh_token: str

    @classmethod
    def from_config(cls) -> "Credentials":
        return cls(
            client_id=config.SPOTIFY_CLIENT_ID,
            client_secret=config.SPOTIFY_CLIENT_SECRET,
            refresh_token=config.SPOTIFY_REFRESH_TOKEN,
        )

    def basic_auth(self) -> str:
        raw = f"{self.client_id}:{self.client_secret}"
        return base64.b64encode(raw.encode()).decode()


@dataclass(frozen=True)
class CachedCredential:
    token: str
    expires_at: int  # epoch seconds

    def is_fresh(self, now: int) -> bool:
        return bool(self.token) and self.expires_at > now + EXPIRY_MARGIN_SECONDS


class TokenCache:
    """Holds at most one access token. One instance per gateway app; nothing is persisted."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        self.credential: CachedCredential | None = None
        # Concurrent cache misses queue here so only one refresh goes out.
        self.refresh_lock = asyncio.Lock()

    def now(self) -> int:
        return int(self.clock())

    def lookup(self) -> str | None:
        """Return the cached token if it is still comfortably valid."""
        cached = self.credential
        if cached is not None and cached.is_fresh(self.now()):
            return cached.token
        return None

    def store(self, token: str, expires_in: int, *, now: int | None = None) -> CachedCredential:
        issued_at = self.now() if now is None else now
        self.credential = CachedCredential(token=token, expires_at=issued_at + int(expires_in))
        return self.credential


async def get_valid_token(credentials: Credentials, cache: TokenCache, client: httpx.AsyncClient) -> str:
    """Return a usable access token, refreshing through Spotify only on a cache miss.

    Raises UpstreamAuthError when Spotify refuses the refresh and NetworkError
    when it cannot be reached. In both cases the cache is left as it was.
    """
    token = cache.lookup()
    if token:
        return token

    async with cache.refresh_lock:
        # Another caller may have refreshed while we were waiting for the lock
        token = cache.lookup()
        if token:
            return token
        now = cache.now()
        token, expires_in = await refresh_access_token(credentials, client)
        cache.store(token, expires_in, now=now)
        logger.info("Spotify access token refreshed (expires in %ds)", expires_in)
        return token


async def refresh_access_token(credentials: Credentials, client: httpx.AsyncClient) -> tuple[str, int]:
    """Exchange the refresh token for (access_token, expires_in). Does not touch any cache."""
    data = await _post_token_form(
        credentials,
        client,
        {"grant_type": "refresh_token", "refresh_token": credentials.refresh_token},
        fallback="Failed to refresh token",
    )
    token = data.get("access_token")
    if not token:
        raise UpstreamAuthError("Failed to refresh token")
    expires_in = data.get("expires_in")
    return str(token), int(DEFAULT_EXPIRES_IN if expires_in is None else expires_in)


async def exchange_authorization_code(
    credentials: Credentials,
    client: httpx.AsyncClient,
    code: str,
    redirect_uri: str,
) -> dict[str, Any]:
    """One-time authorization-code exchange. Returns the raw token payload (incl. refresh_token)."""
    return await _post_token_form(
        credentials,
        client,
        {"grant_type": "authorization_code", "code": code, "redirect_uri": redirect_uri},
        fallback="Token exchange failed",
    )


async def _post_token_form(
    credentials: Credentials,
    client: httpx.AsyncClient,
    form: dict[str, str],
    *,
    fallback: str,
) -> dict[str, Any]:
    try:
        r = await client.post(
            TOKEN_URL,
            data=form,
            headers={
                "Authorization": f"Basic {credentials.basic_auth()}",
                "Content-Type": "application/x-www-form-urlencoded",
            },
        )
    except httpx.RequestError as e:
        logger.warning("Spotify token request failed: %r", e)
        raise NetworkError(f"Spotify token request failed: {e}") from e

    if not r.is_success:
        logger.warning("Spotify token request rejected: %s %s", r.status_code, r.text[:200])
        raise UpstreamAuthError(_error_description(r, fallback))

    try:
        data = r.json()
    except ValueError as e:
        raise UpstreamAuthError(fallback) from e
    if not isinstance(data, dict):
        raise UpstreamAuthError(fallback)
    return data


def _error_description(r: httpx.Response, fallback: str) -> str:
    """Spotify puts the human-readable reason in error_description."""
    try:
        body = r.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("error_description"):
        return str(body["error_description"])
    return fallback
