"""Input validation errors raised by the calculators."""

from __future__ import annotations

from typing import Any


class InvalidInputError(ValueError):
    """Raised when a calculator receives input it cannot price correctly."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}={value!r}: {reason}")


class InvalidPricingRuleError(InvalidInputError):
    """Raised when a pricing rule is malformed."""

    def __init__(self, rule_name: str, field: str, value: Any, reason: str):
        self.rule_name = rule_name
        super().__init__(field, value, f"pricing rule '{rule_name}': {reason}")


class InvalidShiftError(InvalidInputError):
    """Raised when a shift time range is empty or inverted."""


class InvalidIncomeError(InvalidInputError):
    """Raised for negative income or out-of-range rates."""
