#!/usr/bin/env python3
"""
One-time OAuth to get SPOTIFY_REFRESH_TOKEN. Run from the project root with .env containing
SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET. Register redirect URI in Spotify Dashboard:
  http://127.0.0.1:8767/callback
Then run: python scripts/spotify_auth.py
Visit http://127.0.0.1:8767 and log in; the script prints the refresh token to add to .env.
"""

import asyncio
import sys
from http.server import HTTPServer, BaseHTTPRequestHandler
from urllib.parse import parse_qs, urlencode, urlparse

# Add parent so config loads
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx
import config
from proxy.errors import ProxyError
from proxy.token_manager import Credentials, exchange_authorization_code

# Must match exactly what you add in Spotify Dashboard → App → Settings → Redirect URIs
REDIRECT_URI = (config.SPOTIFY_REDIRECT_URI or "http://127.0.0.1:8767/callback").strip()
SCOPE = "playlist-read-private user-read-private"
AUTH_URL = "https://accounts.spotify.com/authorize"

refresh_token_result: list[str] = []


def authorize_url() -> str:
    params = {
        "response_type": "code",
        "client_id": config.SPOTIFY_CLIENT_ID,
        "redirect_uri": REDIRECT_URI,
        "scope": SCOPE,
    }
    return f"{AUTH_URL}?{urlencode(params)}"


async def _exchange(code: str) -> dict:
    credentials = Credentials(config.SPOTIFY_CLIENT_ID, config.SPOTIFY_CLIENT_SECRET, "")
    async with httpx.AsyncClient(timeout=config.UPSTREAM_TIMEOUT) as client:
        return await exchange_authorization_code(credentials, client, code, REDIRECT_URI)


class Handler(BaseHTTPRequestHandler):
    def _text(self, status: int, body: str, content_type: str = "text/plain") -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.end_headers()
        self.wfile.write(body.encode())

    def do_GET(self):
        parsed = urlparse(self.path)
        if parsed.path == "/" or parsed.path == "":
            self.send_response(302)
            self.send_header("Location", authorize_url())
            self.end_headers()
            return
        if parsed.path == "/callback":
            code = (parse_qs(parsed.query).get("code") or [None])[0]
            if not code:
                self._text(400, "Missing code")
                return
            try:
                data = asyncio.run(_exchange(code))
            except ProxyError as e:
                self._text(400, f"Token exchange failed: {e}")
                return
            refresh = data.get("refresh_token")
            if refresh:
                refresh_token_result.append(refresh)
            body = f"<h1>Success</h1><p>Add this to your .env:</p><pre>SPOTIFY_REFRESH_TOKEN={refresh or ''}</pre><p>Then restart the proxy. You can close this tab.</p>"
            self._text(200, body, "text/html")
            return
        self.send_response(404)
        self.end_headers()

    def log_message(self, format, *args):
        pass


def main() -> None:
    if not config.SPOTIFY_CLIENT_ID or not config.SPOTIFY_CLIENT_SECRET:
        print("Set SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET in .env")
        print("Create an app at https://developer.spotify.com/dashboard")
        print(f"Add redirect URI: {REDIRECT_URI}")
        return
    # Parse host/port from redirect URI so Dashboard and server match
    parsed = urlparse(REDIRECT_URI)
    host = parsed.hostname or "127.0.0.1"
    port = parsed.port or 8767
    print("Redirect URI (must match Spotify Dashboard *exactly*):")
    print(f"  {REDIRECT_URI}")
    print()
    server = HTTPServer((host, port), Handler)
    print(f"Open {REDIRECT_URI.replace('/callback', '')} in your browser and log in with Spotify.")
    while not refresh_token_result:
        server.handle_request()
    print("\nAdd to .env:")
    print(f"SPOTIFY_REFRESH_TOKEN={refresh_token_result[0]}")


if __name__ == "__main__":
    main()
