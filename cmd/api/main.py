"""
Mediabase API entry point.

Run with: python cmd/api/main.py
"""

import os
import sys

# Running as a script puts cmd/api on sys.path, not the project root
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import uvicorn

from core.config import get_settings
from core.logger import logger
from internal.api.app import create_app


def main():
    settings = get_settings()

    logger.info("========== Starting Uvicorn Server ==========")
    logger.info(f"Host: {settings.api_host}")
    logger.info(f"Port: {settings.api_port}")
    logger.info(f"Reload: {settings.api_reload}")
    logger.info(f"Workers: {settings.api_workers}")

    log_level = "info" if settings.debug else "warning"

    try:
        if settings.api_reload or settings.api_workers > 1:
            # Reload and multi-worker modes need an import string
            os.environ["PYTHONPATH"] = os.pathsep.join(
                p for p in (project_root, os.environ.get("PYTHONPATH", "")) if p
            )
            uvicorn.run(
                "internal.api.app:create_app",
                factory=True,
                host=settings.api_host,
                port=settings.api_port,
                reload=settings.api_reload,
                workers=None if settings.api_reload else settings.api_workers,
                log_level=log_level,
            )
        else:
            uvicorn.run(
                create_app(settings),
                host=settings.api_host,
                port=settings.api_port,
                log_level=log_level,
            )
    except Exception as e:
        logger.error(f"Failed to start Uvicorn server: {e}")
        logger.exception("Uvicorn startup error details:")
        raise


if __name__ == "__main__":
    main()
