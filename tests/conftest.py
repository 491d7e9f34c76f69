"""Pytest fixtures for shift ledger tests."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from shift_ledger.calculators.engine import EarningsResolver
from shift_ledger.calculators.tax_calculator import PortugalTaxCalculator
from shift_ledger.calculators.types import (
    FixedAmount,
    IRSBracket,
    Multiplier,
    PayModel,
    PricingRule,
    Workplace,
    YearConfig,
)
from shift_ledger.money import Money

LISBON = "Europe/Lisbon"


def lisbon(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """Aware datetime on the Lisbon wall clock."""
    return datetime(year, month, day, hour, minute, tzinfo=ZoneInfo(LISBON))


@pytest.fixture
def resolver() -> EarningsResolver:
    return EarningsResolver(engine_version="test")


@pytest.fixture
def tax_calc() -> PortugalTaxCalculator:
    return PortugalTaxCalculator()


@pytest.fixture
def hourly_workplace() -> Workplace:
    """EUR 25/hour."""
    return Workplace(
        name="Hospital Santa Maria",
        pay_model=PayModel.HOURLY,
        base_rate=Money(2500),
    )


@pytest.fixture
def per_turn_workplace() -> Workplace:
    """EUR 100 per shift."""
    return Workplace(
        name="Clinica do Parque",
        pay_model=PayModel.PER_TURN,
        base_rate=Money(10000),
    )


@pytest.fixture
def monthly_workplace() -> Workplace:
    """EUR 3200/month over 160 expected hours."""
    return Workplace(
        name="Centro de Saude",
        pay_model=PayModel.MONTHLY,
        base_rate=Money(320000),
        monthly_expected_hours=160,
    )


@pytest.fixture
def night_rule() -> PricingRule:
    return PricingRule(
        name="Night",
        priority=1,
        pricing=Multiplier(1.5),
        time_start="22:00",
        time_end="06:00",
    )


@pytest.fixture
def weekend_rule() -> PricingRule:
    return PricingRule(
        name="Weekend",
        priority=2,
        pricing=FixedAmount(Money(4000)),
        days_of_week=frozenset({"sat", "sun"}),
    )


@pytest.fixture
def christmas_rule() -> PricingRule:
    return PricingRule(
        name="Christmas",
        priority=0,
        pricing=FixedAmount(Money(6000)),
        days_of_week=frozenset({"mon"}),
        specific_dates=frozenset({date(2025, 12, 25)}),
    )


@pytest.fixture
def simple_config() -> YearConfig:
    """Three round brackets, no coefficient and no floors."""
    return YearConfig(
        fiscal_year=2099,
        brackets=(
            IRSBracket(Money(0), Money.from_euros(10000), 0.10),
            IRSBracket(Money.from_euros(10000), Money.from_euros(40000), 0.20),
            IRSBracket(Money.from_euros(40000), None, 0.40),
        ),
        ss_rate=0.20,
        ss_income_coefficient=1.0,
        ias_value=Money.from_euros(500),
        default_withholding_rate=0.25,
        min_existence=Money(0),
        simplified_coefficient=1.0,
    )
