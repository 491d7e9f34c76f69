"""Shift ledger command line interface.

Provides tools for:
- Pricing a shift from a JSON payload
- Annual IRS, social security and summary estimates
- Invoice withholding/VAT split
- Listing built-in tax years

Usage:
    python -m shift_ledger earnings shift.json
    python -m shift_ledger irs 45000 --year 2026
    python -m shift_ledger social-security 11250
    python -m shift_ledger summary 45000 --json
    python -m shift_ledger invoice 3000 --withholding-rate 0.25 --vat-rate 0
    python -m shift_ledger years
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable

from pydantic import BaseModel, ValidationError

from shift_ledger.calculators.engine import EarningsResolver
from shift_ledger.calculators.errors import InvalidInputError
from shift_ledger.calculators.tax_calculator import PortugalTaxCalculator
from shift_ledger.calculators.tax_tables import (
    YearConfigNotFoundError,
    available_years,
    get_year_config,
)
from shift_ledger.calculators.types import YearConfig
from shift_ledger.config import get_settings
from shift_ledger.money import Money
from shift_ledger.schemas import (
    AnnualSummaryOut,
    EarningsRequest,
    EarningsResponse,
    InvoiceOut,
    IRSResultOut,
    SSResultOut,
    YearConfigIn,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_INVALID_INPUT = 2


def parse_euros(s: str) -> Money:
    """Parse a major-unit amount such as ``45000`` or ``1234.56``."""
    try:
        return Money.from_euros(Decimal(s))
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"not an amount: {s!r}") from exc


def parse_rate(s: str) -> float:
    """Parse a fraction such as ``0.25``."""
    try:
        return float(s)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a rate: {s!r}") from exc


class ShiftLedgerCli:
    """Shift ledger command line interface."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self.parser = self._build_parser()
        self.tax = PortugalTaxCalculator()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="shift-ledger",
            description="Shift earnings and Portuguese tax estimates",
        )
        parser.add_argument(
            "--log-level",
            default=self.settings.log_level,
            help=f"Logging level (default: {self.settings.log_level})",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # earnings command
        earnings = subparsers.add_parser(
            "earnings",
            help="Price a shift described by a JSON file",
        )
        earnings.add_argument(
            "input",
            type=Path,
            help="JSON file with 'workplace', 'rules' and 'shift' keys ('-' for stdin)",
        )
        earnings.add_argument("--json", action="store_true", help="Emit JSON")

        # tax commands share year selection
        for name, help_text, amount_help in (
            ("irs", "Estimate annual IRS", "Annual gross income in euros"),
            ("social-security", "Estimate social security", "Quarterly gross income in euros"),
            ("summary", "Annual tax summary", "Annual gross income in euros"),
        ):
            cmd = subparsers.add_parser(name, help=help_text)
            cmd.add_argument("gross", type=parse_euros, help=amount_help)
            self._add_year_arguments(cmd)
            cmd.add_argument("--json", action="store_true", help="Emit JSON")

        # invoice command
        invoice = subparsers.add_parser("invoice", help="Split an invoice's gross amount")
        invoice.add_argument("gross", type=parse_euros, help="Invoice gross in euros")
        invoice.add_argument(
            "--withholding-rate",
            type=parse_rate,
            help="Withholding rate (default: the fiscal year's default rate)",
        )
        invoice.add_argument("--vat-rate", type=parse_rate, default=0.0, help="VAT rate (default: 0)")
        self._add_year_arguments(invoice)
        invoice.add_argument("--json", action="store_true", help="Emit JSON")

        # years command
        subparsers.add_parser("years", help="List built-in fiscal years")

        return parser

    def _add_year_arguments(self, cmd: argparse.ArgumentParser) -> None:
        cmd.add_argument(
            "--year",
            type=int,
            default=self.settings.fiscal_year,
            help=f"Fiscal year (default: {self.settings.fiscal_year})",
        )
        cmd.add_argument(
            "--config",
            type=Path,
            help="JSON year configuration overriding the built-in table",
        )

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        logging.basicConfig(
            level=getattr(logging, str(parsed.log_level).upper(), logging.WARNING),
            format="%(levelname)s %(name)s: %(message)s",
        )

        if not parsed.command:
            self.parser.print_help()
            return EXIT_USAGE

        # Dispatch to command handler
        handlers: dict[str, Callable[..., int]] = {
            "earnings": self._cmd_earnings,
            "irs": self._cmd_irs,
            "social-security": self._cmd_social_security,
            "summary": self._cmd_summary,
            "invoice": self._cmd_invoice,
            "years": self._cmd_years,
        }

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return EXIT_USAGE

        try:
            return handler(parsed)
        except ValidationError as e:
            print(f"ERROR: invalid payload\n{e}", file=sys.stderr)
            return EXIT_INVALID_INPUT
        except (InvalidInputError, YearConfigNotFoundError) as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return EXIT_INVALID_INPUT
        except (OSError, json.JSONDecodeError) as e:
            print(f"ERROR: cannot read input: {e}", file=sys.stderr)
            return EXIT_INVALID_INPUT

    def _cmd_earnings(self, args: argparse.Namespace) -> int:
        """Price a shift."""
        raw = sys.stdin.read() if str(args.input) == "-" else args.input.read_text()
        request = EarningsRequest.model_validate(json.loads(raw))

        workplace = request.workplace.to_domain()
        rules = [r.to_domain() for r in request.rules]
        shift = request.shift.to_domain(self.settings.timezone)

        result = EarningsResolver(self.settings.engine_version).resolve_shift(
            shift, workplace, rules
        )

        if args.json:
            self._print_json(EarningsResponse.from_domain(result))
            return EXIT_OK

        print(f"Shift at {workplace.name} ({workplace.pay_model.value})")
        print("=" * 60)
        for seg in result.segments:
            print(
                f"  {seg.start:%Y-%m-%d %H:%M} - {seg.end:%Y-%m-%d %H:%M}"
                f"  {seg.hours:6.2f}h  {str(seg.rate):>14}  {str(seg.amount):>14}  {seg.rule_name}"
            )
        for extra in result.extras:
            print(
                f"  {extra.count} x {extra.kind.value} at {extra.unit_rate}"
                f"  {str(extra.amount):>14}  {extra.rule_name}"
            )
        print("=" * 60)
        print(f"Total: {result.total} over {result.hours:.2f}h")
        if result.extras:
            print(f"Extras: {result.extras_total}")
            print(f"Grand total: {result.grand_total}")
        for warning in result.warnings:
            print(f"Warning: {warning.value}")
        return EXIT_OK

    def _cmd_irs(self, args: argparse.Namespace) -> int:
        """Estimate IRS."""
        config = self._load_year_config(args)
        result = self.tax.calculate_irs(config, args.gross)

        if args.json:
            self._print_json(IRSResultOut.from_domain(result))
            return EXIT_OK

        print(f"IRS {config.fiscal_year} on gross {args.gross}")
        print("=" * 40)
        print(f"Taxable income: {result.taxable_income}")
        for bracket in result.bracket_breakdown:
            print(
                f"  {bracket.bracket_label:>6}  {str(bracket.taxable_in_bracket):>14}"
                f"  {str(bracket.tax_amount):>14}"
            )
        print(f"Total tax: {result.total_tax}")
        print(f"Effective rate: {result.effective_rate:.2%}")
        if result.min_existence_applied:
            print("Minimum existence floor applied")
        return EXIT_OK

    def _cmd_social_security(self, args: argparse.Namespace) -> int:
        """Estimate social security for one quarter."""
        config = self._load_year_config(args)
        result = self.tax.calculate_social_security(config, args.gross)

        if args.json:
            self._print_json(SSResultOut.from_domain(result))
            return EXIT_OK

        print(f"Social security {config.fiscal_year} on quarterly gross {args.gross}")
        print("=" * 40)
        print(f"Relevant income: {result.relevant_income}")
        print(f"Monthly base: {result.monthly_base}")
        print(f"Monthly contribution: {result.monthly_contribution}")
        print(f"Quarterly payment: {result.quarterly_payment}")
        print(f"Annual estimate: {result.annual_estimate}")
        return EXIT_OK

    def _cmd_summary(self, args: argparse.Namespace) -> int:
        """Annual summary."""
        config = self._load_year_config(args)
        summary = self.tax.calculate_annual_summary(config, args.gross)

        if args.json:
            self._print_json(AnnualSummaryOut.from_domain(summary))
            return EXIT_OK

        print(f"Annual summary {config.fiscal_year}")
        print("=" * 40)
        print(f"Gross income: {summary.gross_income}")
        print(f"Taxable income: {summary.taxable_income}")
        print(f"IRS: {summary.irs_amount} ({summary.irs_effective_rate:.2%})")
        print(f"Social security: {summary.ss_annual}")
        print(f"Withholding: {summary.withholding_total}")
        print(f"Net income: {summary.net_income}")
        print(f"Monthly net: {summary.monthly_net}")
        return EXIT_OK

    def _cmd_invoice(self, args: argparse.Namespace) -> int:
        """Invoice withholding and VAT."""
        rate = args.withholding_rate
        if rate is None:
            rate = self._load_year_config(args).default_withholding_rate
        invoice = self.tax.calculate_invoice(args.gross, rate, args.vat_rate)

        if args.json:
            self._print_json(InvoiceOut.from_domain(invoice))
            return EXIT_OK

        print(f"Gross: {invoice.gross}")
        print(f"Withholding ({invoice.withholding_rate:.0%}): {invoice.withholding}")
        print(f"VAT ({invoice.vat_rate:.0%}): {invoice.vat}")
        print(f"Net: {invoice.net}")
        return EXIT_OK

    def _cmd_years(self, args: argparse.Namespace) -> int:
        """List built-in fiscal years."""
        for year in available_years():
            marker = " (default)" if year == self.settings.fiscal_year else ""
            print(f"{year}{marker}")
        return EXIT_OK

    def _load_year_config(self, args: argparse.Namespace) -> YearConfig:
        if args.config is not None:
            payload = json.loads(args.config.read_text())
            logger.info("Using year configuration from %s", args.config)
            return YearConfigIn.model_validate(payload).to_domain()
        return get_year_config(args.year)

    @staticmethod
    def _print_json(model: BaseModel) -> None:
        print(model.model_dump_json(indent=2))


def main() -> int:
    """CLI entry point."""
    cli = ShiftLedgerCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
