from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Pennyekart Storefront"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./storefront.db"
    DATABASE_ECHO: bool = False

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Security
    # ==============================
    API_KEYS: Optional[str] = None
    API_KEY_HEADER: str = "X-API-Key"

    # ==============================
    # Checkout & Fulfillment
    # ==============================
    PLATFORM_FEE: float = 7.0
    DELIVERY_FEE: float = 30.0

    # ==============================
    # Demand & Reorder
    # ==============================
    DEMAND_ORDER_WINDOW: int = 1000
    REORDER_FLOOR: int = 5
    DEMAND_AVERAGING_DAYS: int = 30
    SAFETY_STOCK_DAYS: int = 7
    DEMAND_RANKING_SIZE: int = 20
    PURCHASE_HISTORY_LIMIT: int = 100

    # ==============================
    # Cart Storage
    # ==============================
    CART_STORAGE_DIR: str = "carts"
    CART_STORAGE_KEY: str = "pennyekart_cart"


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
