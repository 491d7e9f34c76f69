"""Portuguese IRS and social security estimates for independent workers."""

from __future__ import annotations

import logging
from typing import Protocol

from shift_ledger.calculators.errors import InvalidIncomeError
from shift_ledger.calculators.types import (
    AnnualSummary,
    BracketResult,
    InvoiceAmounts,
    IRSResult,
    SSResult,
    YearConfig,
)
from shift_ledger.money import Money, max_money, min_money

logger = logging.getLogger(__name__)

# Solidarity surcharge thresholds (taxa adicional de solidariedade)
SOLIDARITY_LOWER = Money.from_euros(80_000)
SOLIDARITY_UPPER = Money.from_euros(250_000)
SOLIDARITY_LOWER_RATE = 0.025
SOLIDARITY_UPPER_RATE = 0.05

# Base ceiling in IAS units
SS_CEILING_IAS_MULTIPLE = 12


class TaxEngine(Protocol):
    """Tax estimation interface, one implementation per tax regime."""

    def calculate_irs(self, config: YearConfig, annual_gross_income: Money) -> IRSResult:
        ...

    def calculate_social_security(
        self, config: YearConfig, quarterly_gross_income: Money
    ) -> SSResult:
        ...

    def calculate_withholding(self, gross_amount: Money, rate: float) -> Money:
        ...

    def calculate_annual_summary(
        self, config: YearConfig, annual_gross_income: Money
    ) -> AnnualSummary:
        ...


class PortugalTaxCalculator:
    """Calculates IRS and social security under the simplified regime.

    IRS pipeline:
    1) Taxable income = gross * simplified coefficient
    2) Marginal tax bracket by bracket, stopping when income is exhausted
    3) Solidarity surcharge above 80k and 250k (major units)
    4) Minimum existence floor on post-tax income (can only lower tax)

    Every multiplication truncates toward zero to the cent. Degenerate inputs
    (zero income) produce zero results rather than errors.
    """

    def calculate_irs(self, config: YearConfig, annual_gross_income: Money) -> IRSResult:
        """Calculate annual income tax."""
        _require_non_negative("annual_gross_income", annual_gross_income)

        taxable_income = annual_gross_income.multiply(config.simplified_coefficient)

        total_tax, breakdown = self._calculate_progressive_tax(taxable_income, config)
        total_tax = total_tax + self._calculate_solidarity_surcharge(taxable_income)

        min_existence_applied = False
        if annual_gross_income - total_tax < config.min_existence:
            clamped = max_money(Money(0), annual_gross_income - config.min_existence)
            logger.info(
                "Minimum existence floor applied for %d: tax %s -> %s",
                config.fiscal_year,
                total_tax,
                clamped,
            )
            total_tax = clamped
            min_existence_applied = True

        effective_rate = 0.0
        if taxable_income.cents > 0:
            effective_rate = total_tax.cents / taxable_income.cents

        return IRSResult(
            taxable_income=taxable_income,
            total_tax=total_tax,
            effective_rate=effective_rate,
            bracket_breakdown=tuple(breakdown),
            min_existence_applied=min_existence_applied,
        )

    def calculate_social_security(
        self, config: YearConfig, quarterly_gross_income: Money
    ) -> SSResult:
        """Calculate the quarterly social security contribution."""
        _require_non_negative("quarterly_gross_income", quarterly_gross_income)

        relevant_income = quarterly_gross_income.multiply(config.ss_income_coefficient)

        # Monthly contributory base, bounded by [1, 12] IAS
        monthly_base = relevant_income.divide(3)
        monthly_base = max_money(monthly_base, config.ias_value)
        monthly_base = min_money(
            monthly_base, config.ias_value.multiply(SS_CEILING_IAS_MULTIPLE)
        )

        monthly_contribution = monthly_base.multiply(config.ss_rate)

        return SSResult(
            relevant_income=relevant_income,
            monthly_base=monthly_base,
            monthly_contribution=monthly_contribution,
            quarterly_payment=monthly_contribution.multiply(3),
            annual_estimate=monthly_contribution.multiply(12),
        )

    def calculate_withholding(self, gross_amount: Money, rate: float) -> Money:
        """Withholding at source on an invoiced or annual gross amount."""
        _require_rate("withholding_rate", rate)
        return gross_amount.multiply(rate)

    def calculate_annual_summary(
        self, config: YearConfig, annual_gross_income: Money
    ) -> AnnualSummary:
        """Combine IRS, social security and withholding for a year.

        Social security is projected from an even quarterly split of the
        annual gross, not from a real quarterly ledger.
        """
        irs = self.calculate_irs(config, annual_gross_income)
        ss = self.calculate_social_security(config, annual_gross_income.divide(4))
        withholding_total = self.calculate_withholding(
            annual_gross_income, config.default_withholding_rate
        )

        net_income = annual_gross_income - irs.total_tax - ss.annual_estimate

        return AnnualSummary(
            gross_income=annual_gross_income,
            taxable_income=irs.taxable_income,
            irs_amount=irs.total_tax,
            irs_effective_rate=irs.effective_rate,
            ss_annual=ss.annual_estimate,
            withholding_total=withholding_total,
            net_income=net_income,
            monthly_net=net_income.divide(12),
            bracket_breakdown=irs.bracket_breakdown,
        )

    def calculate_invoice(
        self, gross_amount: Money, withholding_rate: float, vat_rate: float = 0.0
    ) -> InvoiceAmounts:
        """Split an invoice's gross into withholding, VAT and net receivable."""
        _require_non_negative("gross_amount", gross_amount)
        _require_rate("vat_rate", vat_rate)
        withholding = self.calculate_withholding(gross_amount, withholding_rate)
        vat = gross_amount.multiply(vat_rate)
        return InvoiceAmounts(
            gross=gross_amount,
            withholding_rate=withholding_rate,
            withholding=withholding,
            vat_rate=vat_rate,
            vat=vat,
            net=gross_amount - withholding + vat,
        )

    def _calculate_progressive_tax(
        self, taxable_income: Money, config: YearConfig
    ) -> tuple[Money, list[BracketResult]]:
        """Marginal tax over ascending brackets; records touched brackets only."""
        total_tax = Money(0)
        breakdown: list[BracketResult] = []
        remaining = taxable_income

        for bracket in config.brackets:
            if remaining.cents <= 0:
                break

            width = bracket.width
            taxable_in_bracket = remaining if width is None else min_money(remaining, width)

            tax = taxable_in_bracket.multiply(bracket.rate)
            total_tax = total_tax + tax
            remaining = remaining - taxable_in_bracket

            breakdown.append(
                BracketResult(
                    bracket_label=bracket.label,
                    taxable_in_bracket=taxable_in_bracket,
                    rate=bracket.rate,
                    tax_amount=tax,
                )
            )

        return total_tax, breakdown

    def _calculate_solidarity_surcharge(self, taxable_income: Money) -> Money:
        surcharge = Money(0)
        if taxable_income > SOLIDARITY_LOWER:
            base = min_money(taxable_income, SOLIDARITY_UPPER) - SOLIDARITY_LOWER
            surcharge = surcharge + base.multiply(SOLIDARITY_LOWER_RATE)
        if taxable_income > SOLIDARITY_UPPER:
            surcharge = surcharge + (taxable_income - SOLIDARITY_UPPER).multiply(
                SOLIDARITY_UPPER_RATE
            )
        return surcharge


def _require_non_negative(field: str, amount: Money) -> None:
    if amount.cents < 0:
        raise InvalidIncomeError(field, amount.cents, "must not be negative")


def _require_rate(field: str, rate: float) -> None:
    if not 0 <= rate <= 1:
        raise InvalidIncomeError(field, rate, "must be between 0 and 1")
