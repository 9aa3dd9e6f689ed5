"""Main entry point for Keyword Crawler."""

import os
import uvicorn

from keyword_crawler.core.config import settings
from keyword_crawler.core.logging import logger


def main():
    """Run the Keyword Crawler API server."""
    logger.info("Starting Keyword Crawler API server")

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    # Dev mode: enable auto-reload (set DEV_MODE=1 or UVICORN_RELOAD=1)
    dev_mode = os.environ.get("DEV_MODE", "0") == "1" or os.environ.get("UVICORN_RELOAD", "0") == "1"

    if dev_mode:
        logger.info("Running in DEV MODE with auto-reload enabled")
        uvicorn.run(
            "keyword_crawler.api.main:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["src"],
            log_level=settings.LOG_LEVEL.lower(),
        )
    else:
        # Each worker process runs its own orchestrator and result emitter
        workers = int(os.environ.get("UVICORN_WORKERS", "1"))
        logger.info(f"Running in PRODUCTION MODE with {workers} workers")
        uvicorn.run(
            "keyword_crawler.api.main:app",
            host=host,
            port=port,
            reload=False,
            workers=workers,
            log_level=settings.LOG_LEVEL.lower(),
        )


if __name__ == "__main__":
    main()
