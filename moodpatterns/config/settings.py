"""Application-wide configuration loaded from environment variables."""

import os

from dotenv import load_dotenv

load_dotenv()

# Redis
REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")

# Namespace for every key the store writes (checkins, tags, settings)
KEY_PREFIX: str = os.getenv("KEY_PREFIX", "moodpatterns")

# ── Export / Import ──────────────────────────────────────────────────────

# Version tag written into every JSON export
EXPORT_VERSION: int = 1

# ── Server Configuration ─────────────────────────────────────────────────

SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8000"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Comma-separated list, "*" allows any origin (local PWA dev)
CORS_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
]
