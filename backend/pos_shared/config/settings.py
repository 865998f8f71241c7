"""
Application settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from decimal import Decimal
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with defaults for development."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POS_",
        case_sensitive=False,
    )

    # Database backing the collection store
    database_url: str = "sqlite:///./pos.db"

    # Store-wide service charge applied to food orders (0.10 = 10%).
    # Frozen into each order at creation time.
    service_charge_rate: Decimal = Decimal("0.10")

    # KTV billing policy. Service charge is not applied to KTV sessions
    # unless explicitly enabled.
    ktv_apply_service_charge: bool = False
    ktv_minimum_hours: int = 1

    # Kitchen display: orders older than this are flagged as overdue
    kitchen_overdue_minutes: int = 15

    # IANA zone that decides which business day an order belongs to
    business_timezone: str = "UTC"

    # Receipts and reports
    store_name: str = "Jiangxi Hotel"
    currency_symbol: str = "₱"

    # Server
    rest_api_port: int = 8000

    # Environment
    environment: str = "development"
    debug: bool = True

    def validate_settings(self) -> list[str]:
        """
        Validate business configuration.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        if not (Decimal("0") <= self.service_charge_rate <= Decimal("1")):
            errors.append("SERVICE_CHARGE_RATE must be between 0 and 1")

        if self.ktv_minimum_hours < 1:
            errors.append("KTV_MINIMUM_HOURS must be at least 1")

        if self.kitchen_overdue_minutes < 1:
            errors.append("KITCHEN_OVERDUE_MINUTES must be at least 1")

        try:
            self.business_tz
        except (ZoneInfoNotFoundError, ValueError):
            errors.append(f"BUSINESS_TIMEZONE '{self.business_timezone}' is not a known time zone")

        if self.environment == "production":
            if self.debug:
                errors.append("DEBUG must be False in production")
            if self.database_url.startswith("sqlite"):
                errors.append("DATABASE_URL must point to a server database in production")

        return errors

    @property
    def business_tz(self) -> ZoneInfo:
        return ZoneInfo(self.business_timezone)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience exports
settings = get_settings()

DATABASE_URL = settings.database_url
