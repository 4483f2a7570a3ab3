"""
biodao.api.main — FastAPI application entry point
==================================================

Run with::

    uvicorn biodao.api.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from biodao.api.deps import get_engine  # noqa: E402
from biodao.api.routes.discord import router as discord_router  # noqa: E402
from biodao.api.routes.logs import router as logs_router  # noqa: E402
from biodao.api.routes.projects import router as projects_router  # noqa: E402
from biodao.database.engine import init_db  # noqa: E402
from biodao.services.log_buffer import install_handler  # noqa: E402
from biodao.services.notification_service import drain, pending_count  # noqa: E402

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    """Allowed CORS origins: CORS_ALLOW_ORIGINS (comma-separated) or FRONTEND_URL."""
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    frontend_url = os.getenv("FRONTEND_URL", "").strip()
    if frontend_url:
        return [frontend_url.rstrip("/")]

    return []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — create tables, flush notices on exit."""
    # Uvicorn reconfigures logging on start, so attach the buffer here.
    install_handler()

    engine = get_engine()
    init_db(engine)
    logger.info("BioDAO API started — engine ready (%s)", engine.url.database)
    yield
    if pending_count():
        logger.info("Waiting for %d pending notifications", pending_count())
        await drain()
    logger.info("BioDAO API shutting down")


app = FastAPI(
    title="BioDAO API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(projects_router, prefix="/api")
app.include_router(discord_router, prefix="/api")
app.include_router(logs_router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok", "timestamp": datetime.now(UTC).isoformat()}
