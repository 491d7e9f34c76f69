"""Tests for the command line interface."""

import json

import pytest

from shift_ledger.cli import EXIT_INVALID_INPUT, EXIT_OK, EXIT_USAGE, ShiftLedgerCli
from tests.test_schemas import REQUEST


@pytest.fixture
def cli() -> ShiftLedgerCli:
    return ShiftLedgerCli()


@pytest.fixture
def request_file(tmp_path):
    path = tmp_path / "shift.json"
    path.write_text(json.dumps(REQUEST))
    return path


class TestEarningsCommand:
    """Test the earnings command."""

    def test_json_output(self, cli, request_file, capsys):
        assert cli.run(["earnings", str(request_file), "--json"]) == EXIT_OK

        out = json.loads(capsys.readouterr().out)
        assert out["total_cents"] == 27500
        assert len(out["segments"]) == 3

    def test_text_output(self, cli, request_file, capsys):
        assert cli.run(["earnings", str(request_file)]) == EXIT_OK

        out = capsys.readouterr().out
        assert "Total: EUR 275.00 over 8.00h" in out
        assert "Night" in out

    def test_monthly_warning_printed(self, cli, tmp_path, capsys):
        payload = dict(REQUEST, workplace={"name": "Centro", "pay_model": "monthly", "base_rate_cents": 320000})
        path = tmp_path / "monthly.json"
        path.write_text(json.dumps(payload))

        assert cli.run(["earnings", str(path)]) == EXIT_OK
        assert "Warning: monthly_hours_not_configured" in capsys.readouterr().out

    def test_extras_printed(self, cli, tmp_path, capsys):
        payload = dict(
            REQUEST,
            workplace={**REQUEST["workplace"], "has_outside_visit_pay": True},
            rules=[{**REQUEST["rules"][0], "time_start": "20:00", "outside_visit_rate_cents": 2000}],
            shift={**REQUEST["shift"], "outside_visits": 2},
        )
        path = tmp_path / "visits.json"
        path.write_text(json.dumps(payload))

        assert cli.run(["earnings", str(path)]) == EXIT_OK
        out = capsys.readouterr().out
        assert "2 x outside_visit at EUR 20.00" in out
        assert "Extras: EUR 40.00" in out
        assert "Grand total: EUR 340.00" in out

    def test_invalid_payload(self, cli, tmp_path, capsys):
        payload = dict(REQUEST, rules=[{"name": "Both", "priority": 1, "rate_cents": 1, "rate_multiplier": 1.5}])
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(payload))

        assert cli.run(["earnings", str(path)]) == EXIT_INVALID_INPUT
        assert "invalid payload" in capsys.readouterr().err

    def test_inverted_shift(self, cli, tmp_path, capsys):
        shift = dict(REQUEST["shift"], end_time="2026-01-05T19:00:00")
        path = tmp_path / "inverted.json"
        path.write_text(json.dumps(dict(REQUEST, shift=shift)))

        assert cli.run(["earnings", str(path)]) == EXIT_INVALID_INPUT
        assert "end_time" in capsys.readouterr().err

    def test_missing_file(self, cli, tmp_path, capsys):
        assert cli.run(["earnings", str(tmp_path / "nope.json")]) == EXIT_INVALID_INPUT
        assert "cannot read input" in capsys.readouterr().err


class TestTaxCommands:
    """Test the IRS, social security, summary and invoice commands."""

    def test_irs_json(self, cli, capsys):
        assert cli.run(["irs", "40000", "--year", "2026", "--json"]) == EXIT_OK

        out = json.loads(capsys.readouterr().out)
        assert out["total_tax"] == 654_772
        assert out["taxable_income"] == 3_000_000

    def test_irs_text(self, cli, capsys):
        assert cli.run(["irs", "13000", "--year", "2026"]) == EXIT_OK

        out = capsys.readouterr().out
        assert "Total tax: EUR 120.00" in out
        assert "Minimum existence floor applied" in out

    def test_social_security_json(self, cli, capsys):
        assert cli.run(["social-security", "12000", "--year", "2026", "--json"]) == EXIT_OK
        assert json.loads(capsys.readouterr().out)["quarterly_payment"] == 179_760

    def test_summary_text(self, cli, capsys):
        assert cli.run(["summary", "60000", "--year", "2026"]) == EXIT_OK
        assert "Net income: EUR" in capsys.readouterr().out

    def test_invoice_uses_year_default_rate(self, cli, capsys):
        assert cli.run(["invoice", "3000", "--year", "2026", "--vat-rate", "0.23", "--json"]) == EXIT_OK

        out = json.loads(capsys.readouterr().out)
        assert out["withholding_rate"] == 0.25
        assert out["net_amount_cents"] == 294_000

    def test_custom_year_config(self, cli, tmp_path, capsys):
        config = {
            "fiscal_year": 2030,
            "brackets": [{"min": 0, "max": 10000, "rate": 0.1}, {"min": 10000, "max": None, "rate": 0.2}],
            "ss_rate": 0.214,
            "ss_income_coefficient": 0.7,
            "ias_value": 550,
            "default_withholding_rate": 0.25,
            "min_existence": 0,
            "simplified_coefficient": 1.0,
        }
        path = tmp_path / "year.json"
        path.write_text(json.dumps(config))

        assert cli.run(["irs", "15000", "--config", str(path), "--json"]) == EXIT_OK
        # 10000 * 0.1 + 5000 * 0.2 = 2000
        assert json.loads(capsys.readouterr().out)["total_tax"] == 200_000

    def test_unknown_year(self, cli, capsys):
        assert cli.run(["irs", "40000", "--year", "1999"]) == EXIT_INVALID_INPUT
        assert "1999" in capsys.readouterr().err

    def test_negative_income(self, cli, capsys):
        assert cli.run(["irs", "-5", "--year", "2026"]) == EXIT_INVALID_INPUT

    def test_bad_amount(self, cli):
        with pytest.raises(SystemExit):
            cli.run(["irs", "lots"])


class TestMisc:
    def test_years(self, cli, capsys):
        assert cli.run(["years"]) == EXIT_OK

        out = capsys.readouterr().out
        assert "2025" in out
        assert "2026" in out

    def test_no_command(self, cli, capsys):
        assert cli.run([]) == EXIT_USAGE
