"""Shift earnings and Portuguese tax estimates for freelance clinicians."""

from shift_ledger.calculators import (
    EarningsResolver,
    PortugalTaxCalculator,
    get_year_config,
    resolve_shift_earnings,
    total_earnings,
)
from shift_ledger.calculators.errors import (
    InvalidIncomeError,
    InvalidInputError,
    InvalidPricingRuleError,
    InvalidShiftError,
)
from shift_ledger.calculators.types import (
    DayOfWeek,
    EarningExtra,
    EarningSegment,
    ExtraKind,
    FixedAmount,
    Multiplier,
    PayModel,
    PricingRule,
    Shift,
    Workplace,
    YearConfig,
)
from shift_ledger.money import Money

__version__ = "1.0.0"

__all__ = [
    "EarningsResolver",
    "PortugalTaxCalculator",
    "get_year_config",
    "resolve_shift_earnings",
    "total_earnings",
    "InvalidIncomeError",
    "InvalidInputError",
    "InvalidPricingRuleError",
    "InvalidShiftError",
    "DayOfWeek",
    "EarningExtra",
    "EarningSegment",
    "ExtraKind",
    "FixedAmount",
    "Multiplier",
    "PayModel",
    "PricingRule",
    "Shift",
    "Workplace",
    "YearConfig",
    "Money",
]
