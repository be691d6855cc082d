from __future__ import annotations

from fastapi import FastAPI

from .. import __version__
from . import feed

app = FastAPI(title="gameday-publisher", version=__version__)

app.include_router(feed.router)


@app.get("/healthz")
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
