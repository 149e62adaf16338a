from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from salesdash.core import constants


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Sales Transaction Dashboard"
    ENVIRONMENT: str = "local"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    CORS_ORIGINS: str = "*"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./sales.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Seed feed
    # ==============================
    SEED_URL: str = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"
    SEED_TIMEOUT_SECONDS: int = 30

    # ==============================
    # Queries
    # ==============================
    DEFAULT_PAGE_SIZE: int = constants.DEFAULT_PAGE_SIZE
    MAX_PAGE_SIZE: int = 100
    QUERY_WORKERS: int = 10

    def cors_origins(self) -> list[str]:
        origins = []
        for entry in self.CORS_ORIGINS.split(","):
            entry = entry.strip()
            if entry:
                origins.append(entry)
        return origins


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
