"""
Application configuration using Pydantic settings.
"""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_name: str = "Mizania"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./data/db.sqlite"

    # Cash rules
    currency: str = "DT"
    opening_fund_amount: Decimal = Decimal("50")
    auto_transfer_threshold: Decimal = Decimal("500")  # Above opening fund
    min_operating_amount: Decimal = Decimal("50")
    reconciliation_tolerance: Decimal = Decimal("1")
    closure_hour: int = 20  # Local hour
    min_transfer_amount: Decimal = Decimal("5")
    closure_min_transfer: Decimal = Decimal("10")
    max_daily_transfers: int = 50
    risk_medium: Decimal = Decimal("500")
    risk_high: Decimal = Decimal("1000")
    auto_mode: bool = True

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    frontend_url: str = "http://localhost:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )


# Global settings instance
settings = Settings()
