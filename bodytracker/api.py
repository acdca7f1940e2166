# -*- coding: utf-8 -*-
"""BodyTracker API — entries, charts and insights."""

from __future__ import annotations

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .app_db import init_app_db
from .charts.api import router as charts_router
from .config import settings
from .entries.api import router as entries_router
from .insights.api import router as insights_router


app = FastAPI(
    title="BodyTracker",
    description="Weight, food and exercise log with chart-ready daily buckets",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Created at import so test clients without lifespan events still find the table.
init_app_db(settings.app_db_path)

app.include_router(entries_router)
app.include_router(charts_router)
app.include_router(insights_router)


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    host = os.environ.get("BODYTRACKER_HOST") or os.environ.get("HOST") or "127.0.0.1"
    port_raw = os.environ.get("BODYTRACKER_PORT") or os.environ.get("PORT") or "8000"
    try:
        port = int(port_raw)
    except ValueError:
        port = 8000

    uvicorn.run("bodytracker.api:app", host=host, port=port, reload=False)
