"""Built-in Portuguese tax year configurations.

Tables are kept as payloads in major units with structure:
{
    "fiscal_year": 2026,
    "brackets": [
        {"min": "0", "max": "7703", "rate": "0.125", "deduction": "0"},
        ...
        {"min": "81199", "max": null, "rate": "0.480", "deduction": "11782.35"}
    ],
    "ss_rate": "0.214",
    ...
}
and parsed into YearConfig on lookup.
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import Any

from shift_ledger.calculators.types import IRSBracket, YearConfig
from shift_ledger.money import Money


class YearConfigNotFoundError(Exception):
    """Raised when no tax configuration exists for a fiscal year."""

    def __init__(self, fiscal_year: int, available: tuple[int, ...]):
        self.fiscal_year = fiscal_year
        self.available = available
        super().__init__(
            f"No tax configuration for fiscal year {fiscal_year} "
            f"(available: {', '.join(str(y) for y in available)})"
        )


PORTUGAL_2025: dict[str, Any] = {
    "fiscal_year": 2025,
    "brackets": [
        {"min": "0", "max": "7479", "rate": "0.130", "deduction": "0"},
        {"min": "7479", "max": "11284", "rate": "0.165", "deduction": "261.77"},
        {"min": "11284", "max": "15992", "rate": "0.220", "deduction": "882.40"},
        {"min": "15992", "max": "20700", "rate": "0.250", "deduction": "1362.18"},
        {"min": "20700", "max": "26355", "rate": "0.285", "deduction": "2086.68"},
        {"min": "26355", "max": "38632", "rate": "0.350", "deduction": "3799.73"},
        {"min": "38632", "max": "50483", "rate": "0.370", "deduction": "4572.37"},
        {"min": "50483", "max": "78834", "rate": "0.435", "deduction": "7853.77"},
        {"min": "78834", "max": None, "rate": "0.480", "deduction": "11401.30"},
    ],
    "ss_rate": "0.214",
    "ss_income_coefficient": "0.70",
    "ias_value": "522.50",
    "default_withholding_rate": "0.25",
    "min_existence": "12180",
    "simplified_coefficient": "0.75",
}

PORTUGAL_2026: dict[str, Any] = {
    "fiscal_year": 2026,
    "brackets": [
        {"min": "0", "max": "7703", "rate": "0.125", "deduction": "0"},
        {"min": "7703", "max": "11623", "rate": "0.165", "deduction": "308.12"},
        {"min": "11623", "max": "16472", "rate": "0.220", "deduction": "947.54"},
        {"min": "16472", "max": "21321", "rate": "0.250", "deduction": "1441.70"},
        {"min": "21321", "max": "27146", "rate": "0.285", "deduction": "2187.92"},
        {"min": "27146", "max": "39791", "rate": "0.350", "deduction": "3951.42"},
        {"min": "39791", "max": "51997", "rate": "0.370", "deduction": "4747.24"},
        {"min": "51997", "max": "81199", "rate": "0.435", "deduction": "8129.40"},
        {"min": "81199", "max": None, "rate": "0.480", "deduction": "11782.35"},
    ],
    "ss_rate": "0.214",
    "ss_income_coefficient": "0.70",
    "ias_value": "537.13",
    "default_withholding_rate": "0.25",
    "min_existence": "12880",
    "simplified_coefficient": "0.75",
}

_PAYLOADS: dict[int, dict[str, Any]] = {
    2025: PORTUGAL_2025,
    2026: PORTUGAL_2026,
}


def available_years() -> tuple[int, ...]:
    return tuple(sorted(_PAYLOADS))


@lru_cache(maxsize=None)
def get_year_config(fiscal_year: int) -> YearConfig:
    """Get the built-in configuration for a fiscal year.

    Raises:
        YearConfigNotFoundError: If the year has no table
    """
    payload = _PAYLOADS.get(fiscal_year)
    if payload is None:
        raise YearConfigNotFoundError(fiscal_year, available_years())
    return parse_year_config(payload)


def parse_year_config(payload: dict[str, Any]) -> YearConfig:
    """Parse a major-unit payload into a YearConfig."""
    brackets = []
    for b in payload.get("brackets", []):
        brackets.append(
            IRSBracket(
                lower_limit=Money.from_euros(_decimal_str(b["min"])),
                upper_limit=(
                    Money.from_euros(_decimal_str(b["max"])) if b.get("max") is not None else None
                ),
                rate=float(b["rate"]),
                deduction=Money.from_euros(_decimal_str(b.get("deduction", 0))),
            )
        )

    return YearConfig(
        fiscal_year=int(payload["fiscal_year"]),
        brackets=tuple(brackets),
        ss_rate=float(payload["ss_rate"]),
        ss_income_coefficient=float(payload["ss_income_coefficient"]),
        ias_value=Money.from_euros(_decimal_str(payload["ias_value"])),
        default_withholding_rate=float(payload["default_withholding_rate"]),
        min_existence=Money.from_euros(_decimal_str(payload["min_existence"])),
        simplified_coefficient=float(payload["simplified_coefficient"]),
    )


def _decimal_str(value: Any) -> Decimal:
    return Decimal(str(value))
