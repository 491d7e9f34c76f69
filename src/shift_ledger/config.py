"""Configuration management for shift ledger."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from shift_ledger.calculators.engine import ENGINE_VERSION


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    timezone: str
    fiscal_year: int
    currency: str
    log_level: str
    engine_version: str

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            timezone=os.getenv("SHIFT_LEDGER_TIMEZONE", "Europe/Lisbon"),
            fiscal_year=int(os.getenv("SHIFT_LEDGER_FISCAL_YEAR", "2026")),
            currency=os.getenv("SHIFT_LEDGER_CURRENCY", "EUR"),
            log_level=os.getenv("SHIFT_LEDGER_LOG_LEVEL", "WARNING").upper(),
            engine_version=os.getenv("ENGINE_VERSION", ENGINE_VERSION),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
