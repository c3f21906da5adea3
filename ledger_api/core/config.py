"""
Configuration settings for the API.
Loads environment variables and provides application settings.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # Database
    DATABASE_URL: str = "sqlite:///./ledger.db"
    DATABASE_ECHO: bool = False
    POOL_SIZE: int = 10
    MAX_OVERFLOW: int = 20

    # API
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Ledger API"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "REST API for users, accounts and atomic money transfers"
    CORS_ORIGINS: List[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # "text" or "json"

    # Ledger
    TRANSFER_LOCK_TIMEOUT: float = 10.0  # seconds
    LIST_BATCH_SIZE: int = 500

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
