"""
Application configuration module.
Loads environment variables and provides application-wide settings.
"""
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root (one level up from the package)
PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables or .env file.
    (Note: Environment variables take precedence over .env file)

    Every variable is read with the ``FINCALC_`` prefix,
    e.g. ``FINCALC_LOG_LEVEL=DEBUG``.
    """
    # API
    PROJECT_NAME: str = "fincalc"
    VERSION: str = "0.1.0"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # CORS (for frontend development)
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # History
    HISTORY_MAX_ITEMS: int = 50

    # Calculation limits
    MAX_SAFE_VALUE: float = 1e15
    EPSILON: float = 1e-10
    MAX_AMORTIZATION_MONTHS: int = 600
    MAX_COMPOUNDING_PERIODS: int = 1000
    IRR_MAX_ITERATIONS: int = 100
    IRR_TOLERANCE: float = 1e-10

    # Product rates (percent per year)
    PPF_RATE: float = 7.1
    EPF_RATE: float = 8.5
    CESS_RATE: float = 4.0

    model_config = SettingsConfigDict(
        env_prefix="FINCALC_",
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        )


def get_settings() -> Settings:
    """
    Get settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()
