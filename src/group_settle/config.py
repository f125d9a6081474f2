"""Configuration management for group-settle."""

from collections.abc import Mapping
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .currency import ANCHOR_CURRENCY, DEFAULT_RATES
from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GROUP_SETTLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Currency settings
    default_currency: str = "CAD"  # Used when an expense omits its currency
    anchor_currency: str = ANCHOR_CURRENCY
    exchange_rates: dict[str, Decimal] = {}  # Overrides merged over DEFAULT_RATES

    # Roster seeded into a fresh ledger
    participants: list[str] = []

    # Database path
    database_path: Path = Path.home() / ".group_settle" / "group_settle.db"

    def __init__(self, **kwargs):
        """Initialize settings and create database directory if needed."""
        super().__init__(**kwargs)
        self.database_path.parent.mkdir(parents=True, exist_ok=True)

    @field_validator("default_currency", "anchor_currency")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("exchange_rates")
    @classmethod
    def _positive_rates(cls, value: dict[str, Decimal]) -> dict[str, Decimal]:
        for code, rate in value.items():
            if rate <= 0:
                raise ValueError(f"Exchange rate for {code} must be positive: {rate}")
        return value

    def rate_table(self) -> Mapping[str, Decimal]:
        """Read-only rate table: built-in defaults overlaid with overrides."""
        rates = dict(DEFAULT_RATES)
        rates.update({code.upper(): rate for code, rate in self.exchange_rates.items()})
        return MappingProxyType(rates)


def load_settings(**overrides) -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings(**overrides)
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the GROUP_SETTLE_* environment "
            f"variables or your .env file.\n"
            f"Error: {e}"
        ) from e
