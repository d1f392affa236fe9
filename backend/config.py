"""Application configuration using pydantic-settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./wallet.db"

    # CoinCap price provider
    COINCAP_BASE_URL: str = "https://rest.coincap.io/v3"
    COINCAP_API_TOKEN: str = ""
    COINCAP_TIMEOUT_SECONDS: float = 30.0

    # Background asset price refresh
    PRICE_REFRESH_ENABLED: bool = True
    PRICE_REFRESH_INTERVAL_MS: int = 60000
    PRICE_REFRESH_CONCURRENCY: int = 3

    # Access tokens
    JWT_SECRET: str = "change-me-in-production-use-32-plus-bytes"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_MINUTES: int = 60

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize LOG_LEVEL to an uppercase Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}, got {v!r}")
        return v.upper()

    @field_validator("PRICE_REFRESH_INTERVAL_MS", "PRICE_REFRESH_CONCURRENCY")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Refresh interval and concurrency must be at least 1."""
        if v < 1:
            raise ValueError(f"must be >= 1, got {v}")
        return v

    # App settings
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"


settings = Settings()
