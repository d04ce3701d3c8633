from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Back Office"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./backoffice.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Inventory
    # ==============================
    # "database" reads through the table and falls back to the in-memory copy,
    # "memory" never touches the table.
    INVENTORY_BACKEND: str = "database"
    INVENTORY_SEED_DEMO_DATA: bool = True
    INVENTORY_PAGE_SIZE: int = 20
    INVENTORY_MAX_PAGE_SIZE: int = 200
    INVENTORY_SEARCH_DEBOUNCE_MS: int = 300
    INVENTORY_SYNC_BATCH_SIZE: int = 100

    # ==============================
    # Purchases / Sales
    # ==============================
    PURCHASES_PAGE_SIZE: int = 20
    SALES_PAGE_SIZE: int = 10


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
