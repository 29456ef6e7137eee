# storefront/config.py
import os

# Use DATABASE_URL env var when available (makes containerized runs configurable)
# Fallback to a sensible default pointing to the compose Postgres service.
DATABASE_URL = os.environ.get(
    "DATABASE_URL",
    "postgresql+asyncpg://postgres:postgres@db:5432/storefront_db",
)


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


SQL_ECHO = _flag("SQL_ECHO", "0")
SEED_CATALOG = _flag("STOREFRONT_SEED_CATALOG", "1")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
ENVIRONMENT = os.environ.get("ENVIRONMENT", "development").lower()

CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))
