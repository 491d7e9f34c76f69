"""Pydantic schemas for JSON payloads in and out of the calculators."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from shift_ledger.calculators.types import (
    AnnualSummary,
    BracketResult,
    EarningExtra,
    EarningsResult,
    EarningSegment,
    InvoiceAmounts,
    IRSBracket,
    IRSResult,
    PricingRule,
    Shift,
    SSResult,
    Workplace,
    YearConfig,
)
from shift_ledger.money import Money

DayTag = Literal["mon", "tue", "wed", "thu", "fri", "sat", "sun"]

CLOCK_PATTERN = r"^\d{2}:\d{2}$"


# ============================================================================
# Input schemas
# ============================================================================


class WorkplaceIn(BaseModel):
    """Schema for a workplace payload."""

    name: str = Field(min_length=1, max_length=255)
    pay_model: Literal["hourly", "per_turn", "monthly"]
    base_rate_cents: int = Field(ge=0)
    currency: str = Field(default="EUR", min_length=3, max_length=3)
    monthly_expected_hours: float | None = None
    has_consultation_pay: bool = False
    has_outside_visit_pay: bool = False

    def to_domain(self) -> Workplace:
        return Workplace(
            name=self.name,
            pay_model=self.pay_model,
            base_rate=Money(self.base_rate_cents),
            monthly_expected_hours=self.monthly_expected_hours,
            has_consultation_pay=self.has_consultation_pay,
            has_outside_visit_pay=self.has_outside_visit_pay,
            currency=self.currency,
        )


class PricingRuleIn(BaseModel):
    """Schema for a pricing rule payload (two-field rate form)."""

    name: str = Field(min_length=1, max_length=255)
    priority: int = Field(ge=0)
    time_start: str | None = Field(default=None, pattern=CLOCK_PATTERN)
    time_end: str | None = Field(default=None, pattern=CLOCK_PATTERN)
    days_of_week: list[DayTag] = Field(default_factory=list)
    specific_dates: list[date] = Field(default_factory=list)
    rate_cents: int | None = Field(default=None, ge=0)
    rate_multiplier: float | None = Field(default=None, gt=0)
    consultation_rate_cents: int | None = Field(default=None, ge=0)
    outside_visit_rate_cents: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_rate_fields(self) -> PricingRuleIn:
        if (self.rate_cents is None) == (self.rate_multiplier is None):
            raise ValueError("Must set either rate_cents or rate_multiplier, not both")
        return self

    def to_domain(self) -> PricingRule:
        return PricingRule.from_rate_fields(
            name=self.name,
            priority=self.priority,
            rate=_money_or_none(self.rate_cents),
            rate_multiplier=self.rate_multiplier,
            time_start=self.time_start,
            time_end=self.time_end,
            days_of_week=frozenset(self.days_of_week),
            specific_dates=frozenset(self.specific_dates),
            consultation_rate=_money_or_none(self.consultation_rate_cents),
            outside_visit_rate=_money_or_none(self.outside_visit_rate_cents),
        )


class ShiftIn(BaseModel):
    """Schema for a shift payload."""

    start_time: datetime
    end_time: datetime
    timezone: str | None = None
    patients_seen: int = Field(default=0, ge=0)
    outside_visits: int = Field(default=0, ge=0)

    def to_domain(self, default_timezone: str = "UTC") -> Shift:
        return Shift(
            start_time=self.start_time,
            end_time=self.end_time,
            timezone=self.timezone or default_timezone,
            patients_seen=self.patients_seen,
            outside_visits=self.outside_visits,
        )


class EarningsRequest(BaseModel):
    """A shift with its workplace and active pricing rules."""

    workplace: WorkplaceIn
    rules: list[PricingRuleIn] = Field(default_factory=list)
    shift: ShiftIn


class BracketIn(BaseModel):
    min: float = Field(ge=0)
    max: float | None = None
    rate: float = Field(ge=0, le=1)
    deduction: float = 0


class YearConfigIn(BaseModel):
    """Schema for a tax year configuration in major units."""

    fiscal_year: int
    brackets: list[BracketIn] = Field(min_length=1)
    ss_rate: float = Field(ge=0, le=1)
    ss_income_coefficient: float = Field(ge=0, le=1)
    ias_value: float = Field(ge=0)
    default_withholding_rate: float = Field(ge=0, le=1)
    min_existence: float = Field(ge=0)
    simplified_coefficient: float = Field(ge=0, le=1)

    @model_validator(mode="after")
    def check_brackets_contiguous(self) -> YearConfigIn:
        if self.brackets[0].min != 0:
            raise ValueError("First bracket must start at 0")
        for prev, cur in zip(self.brackets, self.brackets[1:]):
            if prev.max is None or prev.max != cur.min:
                raise ValueError(f"Bracket starting at {cur.min} does not follow the previous one")
        if self.brackets[-1].max is not None:
            raise ValueError("Last bracket must have no upper limit")
        return self

    def to_domain(self) -> YearConfig:
        return YearConfig(
            fiscal_year=self.fiscal_year,
            brackets=tuple(
                IRSBracket(
                    lower_limit=Money.from_euros(b.min),
                    upper_limit=Money.from_euros(b.max) if b.max is not None else None,
                    rate=b.rate,
                    deduction=Money.from_euros(b.deduction),
                )
                for b in self.brackets
            ),
            ss_rate=self.ss_rate,
            ss_income_coefficient=self.ss_income_coefficient,
            ias_value=Money.from_euros(self.ias_value),
            default_withholding_rate=self.default_withholding_rate,
            min_existence=Money.from_euros(self.min_existence),
            simplified_coefficient=self.simplified_coefficient,
        )


def _money_or_none(cents: int | None) -> Money | None:
    return Money(cents) if cents is not None else None


# ============================================================================
# Response schemas
# ============================================================================


class EarningSegmentOut(BaseModel):
    """Schema for a priced segment."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    hours: float
    rate_cents: int
    amount_cents: int
    rule_name: str

    @classmethod
    def from_domain(cls, segment: EarningSegment) -> EarningSegmentOut:
        return cls(
            start=segment.start,
            end=segment.end,
            hours=segment.hours,
            rate_cents=segment.rate.cents,
            amount_cents=segment.amount.cents,
            rule_name=segment.rule_name,
        )


class EarningExtraOut(BaseModel):
    """Schema for a per-unit extras line."""

    model_config = ConfigDict(frozen=True)

    kind: str
    count: int
    unit_rate_cents: int
    amount_cents: int
    rule_name: str

    @classmethod
    def from_domain(cls, extra: EarningExtra) -> EarningExtraOut:
        return cls(
            kind=extra.kind.value,
            count=extra.count,
            unit_rate_cents=extra.unit_rate.cents,
            amount_cents=extra.amount.cents,
            rule_name=extra.rule_name,
        )


class EarningsResponse(BaseModel):
    segments: list[EarningSegmentOut]
    extras: list[EarningExtraOut] = Field(default_factory=list)
    total_cents: int
    extras_total_cents: int = 0
    grand_total_cents: int
    hours: float
    fingerprint: str
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, result: EarningsResult) -> EarningsResponse:
        return cls(
            segments=[EarningSegmentOut.from_domain(s) for s in result.segments],
            extras=[EarningExtraOut.from_domain(e) for e in result.extras],
            total_cents=result.total.cents,
            extras_total_cents=result.extras_total.cents,
            grand_total_cents=result.grand_total.cents,
            hours=result.hours,
            fingerprint=result.fingerprint,
            warnings=[w.value for w in result.warnings],
        )


class BracketOut(BaseModel):
    bracket_label: str
    taxable_in_bracket: int
    rate: float
    tax_amount: int

    @classmethod
    def from_domain(cls, bracket: BracketResult) -> BracketOut:
        return cls(
            bracket_label=bracket.bracket_label,
            taxable_in_bracket=bracket.taxable_in_bracket.cents,
            rate=bracket.rate,
            tax_amount=bracket.tax_amount.cents,
        )


class IRSResultOut(BaseModel):
    taxable_income: int
    total_tax: int
    effective_rate: float
    min_existence_applied: bool
    bracket_breakdown: list[BracketOut]

    @classmethod
    def from_domain(cls, result: IRSResult) -> IRSResultOut:
        return cls(
            taxable_income=result.taxable_income.cents,
            total_tax=result.total_tax.cents,
            effective_rate=result.effective_rate,
            min_existence_applied=result.min_existence_applied,
            bracket_breakdown=[BracketOut.from_domain(b) for b in result.bracket_breakdown],
        )


class SSResultOut(BaseModel):
    relevant_income: int
    monthly_base: int
    monthly_contribution: int
    quarterly_payment: int
    annual_estimate: int

    @classmethod
    def from_domain(cls, result: SSResult) -> SSResultOut:
        return cls(
            relevant_income=result.relevant_income.cents,
            monthly_base=result.monthly_base.cents,
            monthly_contribution=result.monthly_contribution.cents,
            quarterly_payment=result.quarterly_payment.cents,
            annual_estimate=result.annual_estimate.cents,
        )


class AnnualSummaryOut(BaseModel):
    gross_income: int
    taxable_income: int
    irs_amount: int
    irs_effective_rate: float
    ss_annual: int
    withholding_total: int
    net_income: int
    monthly_net: int
    bracket_breakdown: list[BracketOut]

    @classmethod
    def from_domain(cls, summary: AnnualSummary) -> AnnualSummaryOut:
        return cls(
            gross_income=summary.gross_income.cents,
            taxable_income=summary.taxable_income.cents,
            irs_amount=summary.irs_amount.cents,
            irs_effective_rate=summary.irs_effective_rate,
            ss_annual=summary.ss_annual.cents,
            withholding_total=summary.withholding_total.cents,
            net_income=summary.net_income.cents,
            monthly_net=summary.monthly_net.cents,
            bracket_breakdown=[BracketOut.from_domain(b) for b in summary.bracket_breakdown],
        )


class InvoiceOut(BaseModel):
    gross_amount_cents: int
    withholding_rate: float
    withholding_cents: int
    iva_rate: float
    iva_cents: int
    net_amount_cents: int

    @classmethod
    def from_domain(cls, invoice: InvoiceAmounts) -> InvoiceOut:
        return cls(
            gross_amount_cents=invoice.gross.cents,
            withholding_rate=invoice.withholding_rate,
            withholding_cents=invoice.withholding.cents,
            iva_rate=invoice.vat_rate,
            iva_cents=invoice.vat.cents,
            net_amount_cents=invoice.net.cents,
        )
