"""Entrypoint: JSON gateway in-process, dashboard page server in a subprocess."""

import argparse
import asyncio
import logging
import os
import subprocess
import sys
from pathlib import Path

import config
from proxy import gateway

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def start_dashboard() -> subprocess.Popen:
    return subprocess.Popen(
        [sys.executable, "-m", "dashboard.server"],
        cwd=str(PROJECT_ROOT),
        env={
            **os.environ,
            "DASHBOARD_PORT": str(config.DASHBOARD_PORT),
            "PYTHONPATH": str(PROJECT_ROOT),
        },
    )


async def main(with_dashboard: bool = True) -> None:
    if not config.USE_SPOTIFY:
        sys.exit(
            "SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET and SPOTIFY_REFRESH_TOKEN must all be set (.env or environment).\n"
            "Run scripts/spotify_auth.py once to get the refresh token."
        )
    proc = None
    if with_dashboard:
        proc = start_dashboard()
        logger.info("Dashboard on http://%s:%d", config.DASHBOARD_HOST, config.DASHBOARD_PORT)
    try:
        await gateway.run(config.GATEWAY_HOST, config.GATEWAY_PORT)
    finally:
        if proc is not None:
            proc.terminate()
            proc.wait(timeout=5)


def cli() -> None:
    parser = argparse.ArgumentParser(prog="playlist-proxy", description="Spotify playlist gateway and dashboard")
    parser.add_argument("--no-dashboard", action="store_true", help="serve only the JSON gateway")
    args = parser.parse_args()

    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s %(message)s")
    try:
        asyncio.run(main(with_dashboard=not args.no_dashboard))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    cli()
