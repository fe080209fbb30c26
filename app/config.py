"""
Application configuration module.
Loads environment variables and provides application-wide settings.
"""
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root (one level up from this file)
PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables or .env file.
    (Note: Environment variables take precedence over .env file)
    """
    # API
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Personal Finance Calculators API"
    VERSION: str = "1.0.0"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5477

    # Logging
    LOG_LEVEL: str = "INFO"

    # History / preferences store: "memory" or "json"
    STORE_BACKEND: str = "memory"
    STORE_PATH: str = str(PROJECT_ROOT / "data" / "calculator_store.json")

    # Statutory rates (annual %) and limits, revised by government notification
    PPF_RATE: float = 7.1
    NSC_RATE: float = 6.8
    SCSS_RATE: float = 8.2
    POMIS_RATE: float = 7.4
    GRATUITY_CAP: float = 2_000_000.0
    APY_ASSUMED_RETURN: float = 8.0

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        case_sensitive=True,
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get the (cached) settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()
