"""
gitadora.__main__ — Entry point for ``python -m gitadora``
===========================================================

Wiring:
1. Load .env (secrets).
2. Load config.yaml (soft settings).
3. Serve the FastAPI app with uvicorn (blocking).  The app lifespan
   creates tables and seeds the default game version.
"""

from __future__ import annotations

import logging

import uvicorn
from dotenv import load_dotenv

from gitadora.config import load_config

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("gitadora")


def main() -> None:
    """Load settings and run the API server."""

    # 1. Environment variables (secrets).
    load_dotenv()

    # 2. Soft configuration.
    cfg = load_config()
    logger.info("Config loaded — Site: %s", cfg.site_name)

    # 3. API.
    logger.info("Starting API on port %d…", cfg.api_port)
    try:
        uvicorn.run("gitadora.api.main:app", host="0.0.0.0", port=cfg.api_port, log_config=None)
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully…")


if __name__ == "__main__":
    main()
