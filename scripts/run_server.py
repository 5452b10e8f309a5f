#!/usr/bin/env python3
"""Launch the Mood Patterns API server.

Usage:
    # From the repo root with the venv activated:
    python scripts/run_server.py

Reads REDIS_URL, SERVER_HOST, SERVER_PORT and LOG_LEVEL from the
environment (or a .env file).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Ensure the repo root is on sys.path so `moodpatterns` imports work uninstalled
_root_dir = Path(__file__).resolve().parent.parent
if str(_root_dir) not in sys.path:
    sys.path.insert(0, str(_root_dir))

from moodpatterns.config.settings import LOG_LEVEL, SERVER_HOST, SERVER_PORT  # noqa: E402

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s  %(levelname)-7s  %(name)-22s  %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("run_server")


def main() -> None:
    import uvicorn

    logger.info("=" * 60)
    logger.info("  MOOD PATTERNS: private mood journal")
    logger.info("=" * 60)
    logger.info("  API server  →  http://%s:%d", SERVER_HOST, SERVER_PORT)
    logger.info("=" * 60)

    uvicorn.run(
        "moodpatterns.server:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        log_level=LOG_LEVEL.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
