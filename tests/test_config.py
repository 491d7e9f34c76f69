"""Tests for environment-driven settings."""

from shift_ledger.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        for name in (
            "SHIFT_LEDGER_TIMEZONE",
            "SHIFT_LEDGER_FISCAL_YEAR",
            "SHIFT_LEDGER_CURRENCY",
            "SHIFT_LEDGER_LOG_LEVEL",
            "ENGINE_VERSION",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.timezone == "Europe/Lisbon"
        assert settings.fiscal_year == 2026
        assert settings.currency == "EUR"
        assert settings.log_level == "WARNING"
        assert settings.engine_version == "1.0.0"

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("SHIFT_LEDGER_TIMEZONE", "Atlantic/Azores")
        monkeypatch.setenv("SHIFT_LEDGER_FISCAL_YEAR", "2025")
        monkeypatch.setenv("SHIFT_LEDGER_LOG_LEVEL", "debug")

        settings = Settings.from_env()

        assert settings.timezone == "Atlantic/Azores"
        assert settings.fiscal_year == 2025
        assert settings.log_level == "DEBUG"
