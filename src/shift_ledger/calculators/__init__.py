"""Shift earnings and tax calculation engines."""

from shift_ledger.calculators.engine import (
    EarningsResolver,
    resolve_shift_earnings,
    total_earnings,
)
from shift_ledger.calculators.rate_resolver import RateResolver
from shift_ledger.calculators.segment_builder import SegmentBuilder
from shift_ledger.calculators.tax_calculator import PortugalTaxCalculator, TaxEngine
from shift_ledger.calculators.tax_tables import (
    YearConfigNotFoundError,
    available_years,
    get_year_config,
)

__all__ = [
    "EarningsResolver",
    "resolve_shift_earnings",
    "total_earnings",
    "RateResolver",
    "SegmentBuilder",
    "PortugalTaxCalculator",
    "TaxEngine",
    "YearConfigNotFoundError",
    "available_years",
    "get_year_config",
]
