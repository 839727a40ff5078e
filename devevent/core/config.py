import os

# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./devevent.db")

# Redis configuration
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
EVENT_CACHE_TTL = int(os.getenv("EVENT_CACHE_TTL", "3600"))

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def get_database_url():
    return DATABASE_URL


def get_redis_url():
    return REDIS_URL


def get_cache_ttl() -> int:
    return EVENT_CACHE_TTL


def get_cors_origins() -> list[str]:
    return [origin.strip() for origin in CORS_ORIGINS.split(",") if origin.strip()]
