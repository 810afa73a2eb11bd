from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables (and `.env`).
    """
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    DATABASE_URL: str = "sqlite:///./kiosk.db"

    # Redis cache
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_TTL: int = 300
    CACHE_ENABLED: bool = True

    # Celery
    CELERY_BROKER_URL: str = "redis://localhost:6379/1"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/2"
    CELERY_TASK_ALWAYS_EAGER: bool = False

    # Kiosk
    ADMIN_PIN: str = "1234"  # demo only, not a security boundary
    SEED_FILE: str = "products.txt"
    TOP_SELLERS_LIMIT: int = 5


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
