"""Public read-only JSON gateway: serves the account's Spotify profile and playlists to the dashboard.

Routes: /health, /api/user, /api/playlists?limit=&offset=, OPTIONS on any path.
The method is not checked (only OPTIONS is special), so POST /health answers like GET.
Every response carries the same permissive CORS headers so a static page on
another origin can call it.
"""

import asyncio
import logging

import httpx
from aiohttp import web

import config
from proxy import spotify_client
from proxy.errors import NotFoundError
from proxy.token_manager import Credentials, TokenCache, get_valid_token

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Max-Age": "86400",
}

CREDENTIALS_KEY = web.AppKey("credentials", Credentials)
TOKEN_CACHE_KEY = web.AppKey("token_cache", TokenCache)
HTTP_CLIENT_KEY = web.AppKey("http_client", httpx.AsyncClient)


def json_response(data, status: int = 200) -> web.Response:
    return web.json_response(data, status=status, headers=CORS_HEADERS)


@web.middleware
async def cors_and_errors(request: web.Request, handler) -> web.StreamResponse:
    """Answer preflights, attach CORS headers, and turn every failure into {error: message}."""
    if request.method == "OPTIONS":
        return web.Response(status=200, headers=CORS_HEADERS)
    try:
        return await handler(request)
    except (web.HTTPNotFound, NotFoundError):
        return json_response({"error": "Not found"}, status=404)
    except Exception as e:
        logger.exception("Gateway error on %s %s", request.method, request.path)
        return json_response({"error": str(e) or "Internal server error"}, status=500)


async def _access_token(request: web.Request) -> str:
    app = request.app
    return await get_valid_token(app[CREDENTIALS_KEY], app[TOKEN_CACHE_KEY], app[HTTP_CLIENT_KEY])


async def handle_health(request: web.Request) -> web.Response:
    """GET /health -> {status: ok}. Never touches the token cache."""
    return json_response({"status": "ok"})


async def handle_user(request: web.Request) -> web.Response:
    """GET /api/user -> Spotify /me, relayed as-is."""
    token = await _access_token(request)
    user = await spotify_client.get_current_user(request.app[HTTP_CLIENT_KEY], token)
    return json_response(user)


async def handle_playlists(request: web.Request) -> web.Response:
    """GET /api/playlists -> Spotify /me/playlists, relayed as-is."""
    limit = request.query.get("limit") or "50"
    offset = request.query.get("offset") or "0"
    token = await _access_token(request)
    playlists = await spotify_client.get_current_user_playlists(
        request.app[HTTP_CLIENT_KEY], token, limit=limit, offset=offset
    )
    return json_response(playlists)


def _http_client_ctx(transport: httpx.AsyncBaseTransport | None):
    async def ctx(app: web.Application):
        async with httpx.AsyncClient(timeout=config.UPSTREAM_TIMEOUT, transport=transport) as client:
            app[HTTP_CLIENT_KEY] = client
            yield

    return ctx


def create_app(
    credentials: Credentials | None = None,
    *,
    cache: TokenCache | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> web.Application:
    """Build the gateway. transport replaces the network for every upstream call (tests)."""
    app = web.Application(middlewares=[cors_and_errors])
    app[CREDENTIALS_KEY] = credentials or Credentials.from_config()
    app[TOKEN_CACHE_KEY] = cache or TokenCache()
    app.cleanup_ctx.append(_http_client_ctx(transport))
    app.router.add_route("*", "/health", handle_health)
    app.router.add_route("*", "/api/user", handle_user)
    app.router.add_route("*", "/api/playlists", handle_playlists)
    return app


async def run(host: str = config.GATEWAY_HOST, port: int = config.GATEWAY_PORT) -> None:
    app = create_app()
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info("Gateway on http://%s:%d (try /health)", host, port)
    try:
        await asyncio.Future()  # run forever
    finally:
        await runner.cleanup()
