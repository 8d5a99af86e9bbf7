"""FastAPI page server for the playlist dashboard. Every page load re-runs the gateway fetch."""

from typing import AsyncIterator

import httpx
import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import HTMLResponse

import config
from dashboard.loader import gateway_client, load_dashboard
from dashboard.render import render_page

app = FastAPI(title="Playlist Dashboard")


async def get_gateway() -> AsyncIterator[httpx.AsyncClient]:
    async with gateway_client() as client:
        yield client


@app.get("/", response_class=HTMLResponse)
async def index(client: httpx.AsyncClient = Depends(get_gateway)) -> HTMLResponse:
    view = await load_dashboard(client)
    return HTMLResponse(render_page(view))


@app.get("/view")
async def view_json(client: httpx.AsyncClient = Depends(get_gateway)) -> dict:
    view = await load_dashboard(client)
    return view.to_dict()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


def run(host: str | None = None, port: int | None = None) -> None:
    uvicorn.run(app, host=host or config.DASHBOARD_HOST, port=port or config.DASHBOARD_PORT)


if __name__ == "__main__":
    run()
