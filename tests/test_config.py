import json

import pytest

from classification import DEFAULT_RULES
from config import DashboardConfig, LargeTransactionConfig, RecurringCostConfig, load_settings


def test_load_settings_defaults():
    settings = load_settings()

    assert settings.log_level == "INFO"
    assert settings.rules_path is None
    assert settings.port == 8001
    assert settings.dashboard_config() == DashboardConfig()


def test_load_settings_from_environment(monkeypatch, tmp_path):
    rules = tmp_path / "rules.json"
    rules.write_text(json.dumps({"Kids": ["daycare"]}), encoding="utf-8")
    monkeypatch.setenv("FLOFI_PORT", "9000")
    monkeypatch.setenv("FLOFI_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("FLOFI_RULES_PATH", str(rules))

    settings = load_settings()

    assert settings.port == 9000
    assert settings.log_level == "DEBUG"
    assert settings.dashboard_config().rules.bucket_names() == ["Kids", "Other"]


def test_load_settings_rejects_bad_port(monkeypatch):
    monkeypatch.setenv("FLOFI_PORT", "eighty")

    with pytest.raises(ValueError, match="FLOFI_PORT"):
        load_settings()


def test_default_thresholds():
    config = DashboardConfig()

    assert config.rules is DEFAULT_RULES
    assert config.recurring_cost == RecurringCostConfig()
    assert config.recurring_cost.denylist == ("chevron", "shell")
    assert config.large_transactions == LargeTransactionConfig()
    assert "credit card payment" in config.large_transactions.excluded_categories
