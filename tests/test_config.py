"""Tests for settings loading."""

from decimal import Decimal

import pytest

from group_settle.config import Settings, load_settings
from group_settle.currency import DEFAULT_RATES
from group_settle.exceptions import ConfigurationError


class TestSettings:
    def test_defaults(self, settings):
        assert settings.default_currency == "CAD"
        assert settings.anchor_currency == "CAD"
        assert settings.exchange_rates == {}

    def test_database_directory_created(self, settings):
        assert settings.database_path.parent.is_dir()

    def test_environment_overrides(self, settings, monkeypatch, tmp_path):
        monkeypatch.setenv("GROUP_SETTLE_DEFAULT_CURRENCY", "usd")
        monkeypatch.setenv("GROUP_SETTLE_EXCHANGE_RATES", '{"usd": "1.40"}')
        monkeypatch.setenv("GROUP_SETTLE_DATABASE_PATH", str(tmp_path / "env.db"))

        loaded = load_settings()

        assert loaded.default_currency == "USD"
        assert loaded.database_path == tmp_path / "env.db"
        assert loaded.rate_table()["USD"] == Decimal("1.40")

    def test_dotenv_file(self, settings, tmp_path):
        (tmp_path / ".env").write_text(
            "GROUP_SETTLE_PARTICIPANTS=[\"Ann\", \"Ben\"]\n"
            f"GROUP_SETTLE_DATABASE_PATH={tmp_path / 'dotenv.db'}\n"
        )

        assert load_settings().participants == ["Ann", "Ben"]

    def test_rate_table_is_read_only(self, settings):
        rates = settings.rate_table()

        assert dict(rates) == dict(DEFAULT_RATES)
        with pytest.raises(TypeError):
            rates["USD"] = Decimal("9")  # type: ignore[index]

    def test_rate_table_overlays_defaults(self, settings, tmp_path):
        custom = Settings(
            database_path=tmp_path / "x.db", exchange_rates={"EUR": Decimal("1.5")}
        )

        rates = custom.rate_table()

        assert rates["EUR"] == Decimal("1.5")
        assert rates["USD"] == DEFAULT_RATES["USD"]


class TestLoadSettings:
    def test_invalid_value_wrapped(self, settings, monkeypatch):
        monkeypatch.setenv("GROUP_SETTLE_EXCHANGE_RATES", '{"USD": "lots"}')

        with pytest.raises(ConfigurationError, match="GROUP_SETTLE_"):
            load_settings()

    @pytest.mark.parametrize("rate", ["0", "-1.35"])
    def test_non_positive_rate_rejected(self, settings, monkeypatch, rate):
        monkeypatch.setenv("GROUP_SETTLE_EXCHANGE_RATES", f'{{"USD": "{rate}"}}')

        with pytest.raises(ConfigurationError, match="must be positive"):
            load_settings()
