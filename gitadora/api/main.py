"""
gitadora.api.main — FastAPI application entry point
====================================================

Run with::

    uvicorn gitadora.api.main:app --reload --port 8000

or ``python -m gitadora``, which reads the port from config.yaml.  Either
way the lifespan creates tables and seeds the default game version.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from gitadora.api.auth import router as auth_router  # noqa: E402
from gitadora.api.deps import get_config, get_engine  # noqa: E402
from gitadora.api.routes.skill import router as skill_router  # noqa: E402
from gitadora.api.routes.versions import router as versions_router  # noqa: E402
from gitadora.database.engine import init_db, run_db  # noqa: E402

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    """Resolve allowed CORS origins from env with safe defaults.

    Priority:
      1) CORS_ALLOW_ORIGINS (comma-separated)
      2) FRONTEND_URL (single origin)

    The score-scraping bookmarklet posts from the game's own site, so that
    origin usually belongs in CORS_ALLOW_ORIGINS.
    """
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    frontend_url = os.getenv("FRONTEND_URL", "").strip()
    if frontend_url:
        return [frontend_url.rstrip("/")]

    return []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — ensure tables and the default version."""
    engine = get_engine()
    await run_db(init_db, engine, get_config().default_version)
    logger.info("GITADORA skill API started — engine ready (%s)", engine.url.database)
    yield
    logger.info("GITADORA skill API shutting down")


app = FastAPI(
    title="GITADORA Skill Tracker API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Mount routers
app.include_router(auth_router, prefix="/api")
app.include_router(skill_router, prefix="/api")
app.include_router(versions_router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}
