"""Spotify credentials, ports, timeouts."""

import os
from pathlib import Path

# Load .env if present (no extra dependency required for minimal setup)
_env = Path(__file__).resolve().parent / ".env"
if _env.exists():
    for line in _env.read_text().strip().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            k, v = line.split("=", 1)
            os.environ.setdefault(k.strip(), v.strip().strip('"').strip("'"))

# Spotify app credentials. Get the refresh token once via scripts/spotify_auth.py
SPOTIFY_CLIENT_ID: str = os.environ.get("SPOTIFY_CLIENT_ID", "").strip()
SPOTIFY_CLIENT_SECRET: str = os.environ.get("SPOTIFY_CLIENT_SECRET", "").strip()
SPOTIFY_REFRESH_TOKEN: str = os.environ.get("SPOTIFY_REFRESH_TOKEN", "").strip()
# Only used by scripts/spotify_auth.py; must match the Spotify Dashboard exactly.
SPOTIFY_REDIRECT_URI: str = os.environ.get("SPOTIFY_REDIRECT_URI", "http://127.0.0.1:8767/callback").strip()
USE_SPOTIFY: bool = bool(SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET and SPOTIFY_REFRESH_TOKEN)

# Gateway (JSON proxy)
GATEWAY_HOST: str = os.environ.get("GATEWAY_HOST", "127.0.0.1")
GATEWAY_PORT: int = int(os.environ.get("GATEWAY_PORT", "8787"))

# Dashboard page server
DASHBOARD_HOST: str = os.environ.get("DASHBOARD_HOST", "127.0.0.1")
DASHBOARD_PORT: int = int(os.environ.get("DASHBOARD_PORT", "8788"))
# Where the dashboard fetches its data from (the deployed gateway)
DASHBOARD_API_URL: str = os.environ.get("DASHBOARD_API_URL", f"http://127.0.0.1:{GATEWAY_PORT}").strip().rstrip("/")

# Seconds before a hung upstream call is abandoned
UPSTREAM_TIMEOUT: float = float(os.environ.get("UPSTREAM_TIMEOUT", "10.0"))
DASHBOARD_TIMEOUT: float = float(os.environ.get("DASHBOARD_TIMEOUT", "10.0"))

LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
