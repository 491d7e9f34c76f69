"""Type definitions for the earnings and tax calculators."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Union
from uuid import UUID
from zoneinfo import ZoneInfo

from shift_ledger.calculators.clock import (
    duration_microseconds,
    parse_clock,
    resolve_zone,
    to_utc,
)
from shift_ledger.calculators.errors import (
    InvalidInputError,
    InvalidPricingRuleError,
    InvalidShiftError,
)
from shift_ledger.money import Money, sum_money

BASE_RULE_NAME = "base"


class PayModel(str, Enum):
    """Unit basis by which a workplace rate becomes an amount."""

    HOURLY = "hourly"
    PER_TURN = "per_turn"
    MONTHLY = "monthly"


class DayOfWeek(str, Enum):
    MON = "mon"
    TUE = "tue"
    WED = "wed"
    THU = "thu"
    FRI = "fri"
    SAT = "sat"
    SUN = "sun"


WEEKDAYS = frozenset({DayOfWeek.MON, DayOfWeek.TUE, DayOfWeek.WED, DayOfWeek.THU, DayOfWeek.FRI})
WEEKEND = frozenset({DayOfWeek.SAT, DayOfWeek.SUN})
ALL_DAYS = WEEKDAYS | WEEKEND


class EarningsWarning(str, Enum):
    """Degenerate-but-valid conditions surfaced alongside a result."""

    MONTHLY_HOURS_NOT_CONFIGURED = "monthly_hours_not_configured"


class ExtraKind(str, Enum):
    """Per-unit pay on top of time-based earnings."""

    CONSULTATION = "consultation"
    OUTSIDE_VISIT = "outside_visit"


# ============================================================================
# Pricing terms
# ============================================================================


@dataclass(frozen=True)
class FixedAmount:
    """Absolute rate replacing the workplace base rate."""

    amount: Money

    def apply(self, base_rate: Money) -> Money:
        return self.amount


@dataclass(frozen=True)
class Multiplier:
    """Factor applied to the workplace base rate."""

    factor: float

    def apply(self, base_rate: Money) -> Money:
        return base_rate.multiply(self.factor)


PricingTerm = Union[FixedAmount, Multiplier]


# ============================================================================
# Inputs
# ============================================================================


@dataclass(frozen=True)
class Workplace:
    """A workplace as seen by the earnings resolver."""

    name: str
    pay_model: PayModel
    base_rate: Money
    monthly_expected_hours: float | None = None
    has_consultation_pay: bool = False
    has_outside_visit_pay: bool = False
    currency: str = "EUR"
    workplace_id: UUID | None = None

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "pay_model", PayModel(self.pay_model))
        except ValueError as exc:
            raise InvalidInputError("pay_model", self.pay_model, "unknown pay model") from exc
        if not isinstance(self.base_rate, Money):
            raise InvalidInputError("base_rate", self.base_rate, "must be Money")
        if self.base_rate.cents < 0:
            raise InvalidInputError("base_rate", self.base_rate.cents, "must not be negative")

    def pays_extra(self, kind: ExtraKind) -> bool:
        if kind == ExtraKind.CONSULTATION:
            return self.has_consultation_pay
        return self.has_outside_visit_pay


@dataclass(frozen=True)
class PricingRule:
    """A prioritized override of a workplace's base rate.

    ``specific_dates``, when non-empty, replaces day-of-week matching. A time
    window only restricts matching when both ends are set.
    """

    name: str
    priority: int
    pricing: PricingTerm
    time_start: str | None = None
    time_end: str | None = None
    days_of_week: frozenset[DayOfWeek] = field(default_factory=frozenset)
    specific_dates: frozenset[date] = field(default_factory=frozenset)
    consultation_rate: Money | None = None
    outside_visit_rate: Money | None = None
    rule_id: UUID | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.pricing, (FixedAmount, Multiplier)):
            raise InvalidPricingRuleError(
                self.name, "pricing", self.pricing, "must be FixedAmount or Multiplier"
            )
        if isinstance(self.pricing, FixedAmount) and self.pricing.amount.cents < 0:
            raise InvalidPricingRuleError(
                self.name, "rate", self.pricing.amount.cents, "must not be negative"
            )
        if isinstance(self.pricing, Multiplier) and not self.pricing.factor > 0:
            raise InvalidPricingRuleError(
                self.name, "rate_multiplier", self.pricing.factor, "must be positive"
            )
        for name in ("consultation_rate", "outside_visit_rate"):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, Money) or value.cents < 0):
                raise InvalidPricingRuleError(
                    self.name, name, value, "must be non-negative Money"
                )
        for name in ("time_start", "time_end"):
            value = getattr(self, name)
            if value is not None:
                try:
                    parse_clock(value, name)
                except InvalidInputError as exc:
                    raise InvalidPricingRuleError(self.name, name, value, exc.reason) from exc
        try:
            days = frozenset(DayOfWeek(d) for d in self.days_of_week)
        except ValueError as exc:
            raise InvalidPricingRuleError(
                self.name, "days_of_week", list(self.days_of_week), "unknown weekday tag"
            ) from exc
        object.__setattr__(self, "days_of_week", days)
        object.__setattr__(
            self, "specific_dates", frozenset(_coerce_date(self.name, d) for d in self.specific_dates)
        )

    @classmethod
    def from_rate_fields(
        cls,
        name: str,
        priority: int,
        rate: Money | None = None,
        rate_multiplier: float | None = None,
        **kwargs: Any,
    ) -> PricingRule:
        """Build a rule from the two-field storage form.

        Exactly one of ``rate`` and ``rate_multiplier`` must be given.
        """
        if (rate is None) == (rate_multiplier is None):
            raise InvalidPricingRuleError(
                name,
                "rate",
                {"rate": rate, "rate_multiplier": rate_multiplier},
                "set exactly one of rate or rate_multiplier",
            )
        pricing: PricingTerm = FixedAmount(rate) if rate is not None else Multiplier(rate_multiplier)
        return cls(name=name, priority=priority, pricing=pricing, **kwargs)

    @property
    def start_minutes(self) -> int | None:
        return parse_clock(self.time_start) if self.time_start is not None else None

    @property
    def end_minutes(self) -> int | None:
        return parse_clock(self.time_end) if self.time_end is not None else None

    @property
    def is_overnight(self) -> bool:
        start, end = self.start_minutes, self.end_minutes
        return start is not None and end is not None and start > end

    def unit_rate(self, kind: ExtraKind) -> Money | None:
        if kind == ExtraKind.CONSULTATION:
            return self.consultation_rate
        return self.outside_visit_rate


def _coerce_date(rule_name: str, value: date | str) -> date:
    if isinstance(value, datetime):
        raise InvalidPricingRuleError(rule_name, "specific_dates", value, "expected a date")
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise InvalidPricingRuleError(
            rule_name, "specific_dates", value, "expected YYYY-MM-DD"
        ) from exc


@dataclass(frozen=True)
class Shift:
    """A worked time span in a named timezone."""

    start_time: datetime
    end_time: datetime
    timezone: str = "UTC"
    patients_seen: int = 0
    outside_visits: int = 0

    def __post_init__(self) -> None:
        for name in ("patients_seen", "outside_visits"):
            count = getattr(self, name)
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise InvalidShiftError(name, count, "must be a non-negative integer")
        tz = resolve_zone(self.timezone)
        if duration_microseconds(to_utc(self.start_time, tz), to_utc(self.end_time, tz)) <= 0:
            raise InvalidShiftError(
                "end_time", self.end_time, f"must be after start_time {self.start_time}"
            )

    @property
    def zone(self) -> ZoneInfo:
        return resolve_zone(self.timezone)

    def extra_count(self, kind: ExtraKind) -> int:
        if kind == ExtraKind.CONSULTATION:
            return self.patients_seen
        return self.outside_visits


# ============================================================================
# Earnings outputs
# ============================================================================


@dataclass(frozen=True)
class EarningSegment:
    """A contiguous slice of a shift priced at a single rate."""

    start: datetime
    end: datetime
    hours: float
    rate: Money
    amount: Money
    rule_name: str = BASE_RULE_NAME

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "hours": repr(self.hours),
            "rate": self.rate.cents,
            "amount": self.amount.cents,
            "rule_name": self.rule_name,
        }


@dataclass(frozen=True)
class EarningExtra:
    """Per-unit pay for a shift, e.g. consultations at a rule's unit rate."""

    kind: ExtraKind
    count: int
    unit_rate: Money
    amount: Money
    rule_name: str

    def to_canonical_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "count": self.count,
            "unit_rate": self.unit_rate.cents,
            "amount": self.amount.cents,
            "rule_name": self.rule_name,
        }


@dataclass(frozen=True)
class EarningsResult:
    """Segments for one shift plus their totals."""

    segments: tuple[EarningSegment, ...]
    total: Money
    hours: float
    fingerprint: str
    warnings: tuple[EarningsWarning, ...] = ()
    extras: tuple[EarningExtra, ...] = ()

    @property
    def extras_total(self) -> Money:
        return sum_money(e.amount for e in self.extras)

    @property
    def grand_total(self) -> Money:
        """Time-based total plus per-unit extras."""
        return self.total + self.extras_total

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


# ============================================================================
# Tax configuration and outputs
# ============================================================================


@dataclass(frozen=True)
class IRSBracket:
    """Income tax bracket over ``[lower_limit, upper_limit)``."""

    lower_limit: Money
    upper_limit: Money | None  # None = no upper limit
    rate: float
    deduction: Money = Money(0)  # Parcel to deduct under the cumulative formula; unused

    @property
    def width(self) -> Money | None:
        if self.upper_limit is None:
            return None
        return self.upper_limit - self.lower_limit

    @property
    def label(self) -> str:
        return f"{self.rate * 100:.1f}%"


@dataclass(frozen=True)
class YearConfig:
    """Tax parameters for one fiscal year."""

    fiscal_year: int
    brackets: tuple[IRSBracket, ...]
    ss_rate: float
    ss_income_coefficient: float
    ias_value: Money
    default_withholding_rate: float
    min_existence: Money
    simplified_coefficient: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "brackets", tuple(self.brackets))


@dataclass(frozen=True)
class BracketResult:
    bracket_label: str
    taxable_in_bracket: Money
    rate: float
    tax_amount: Money


@dataclass(frozen=True)
class IRSResult:
    taxable_income: Money
    total_tax: Money
    effective_rate: float
    bracket_breakdown: tuple[BracketResult, ...] = ()
    min_existence_applied: bool = False


@dataclass(frozen=True)
class SSResult:
    relevant_income: Money
    monthly_base: Money
    monthly_contribution: Money
    quarterly_payment: Money
    annual_estimate: Money


@dataclass(frozen=True)
class AnnualSummary:
    gross_income: Money
    taxable_income: Money
    irs_amount: Money
    irs_effective_rate: float
    ss_annual: Money
    withholding_total: Money
    net_income: Money
    monthly_net: Money
    bracket_breakdown: tuple[BracketResult, ...] = ()


@dataclass(frozen=True)
class InvoiceAmounts:
    """Withholding and VAT derived from an invoice's gross amount."""

    gross: Money
    withholding_rate: float
    withholding: Money
    vat_rate: float
    vat: Money
    net: Money
