from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from premium_picker.config import EligibilityRules, Settings, load_settings
from premium_picker.utils.settings import safe_load_settings

_ENV_VARS = [
    "TDA_API_KEY",
    "TDA_CLIENT_ID",
    "TDA_REDIRECT_URL",
    "TDA_ACCOUNT_ID",
    "TDA_ACCESS_TOKEN",
    "MIN_OPEN_INTEREST",
    "DEFAULT_MULTIPLIER",
    "SUGGESTION_COUNT",
    "APP_SETTINGS",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of these tests.
    monkeypatch.chdir(tmp_path)


def test_defaults():
    s = Settings()
    assert s.api_key == ""
    assert s.base_url == "https://api.tdameritrade.com/v1"
    assert s.suggestion_count == 3
    assert s.chain_strike_count == 5
    assert s.chain_window_days == 45
    rules = s.eligibility_rules()
    assert rules.min_open_interest == 10
    assert rules.default_multiplier == 100.0


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("TDA_API_KEY", "KEY")
    monkeypatch.setenv("MIN_OPEN_INTEREST", "25")
    monkeypatch.setenv("SUGGESTION_COUNT", "5")
    s = load_settings()
    assert s.api_key == "KEY"
    assert s.suggestion_count == 5
    assert s.eligibility_rules().min_open_interest == 25


def test_app_settings_blob_sets_oauth_fields(monkeypatch):
    monkeypatch.setenv("TDA_CLIENT_ID", "from-env")
    monkeypatch.setenv(
        "APP_SETTINGS",
        json.dumps({"tda_client_id": "CLIENT", "tda_redirect_url": "https://localhost/oauth"}),
    )
    s = load_settings()
    assert s.client_id == "CLIENT"
    assert s.redirect_url == "https://localhost/oauth"


def test_app_settings_blob_must_be_object(monkeypatch):
    monkeypatch.setenv("APP_SETTINGS", "[1, 2]")
    with pytest.raises(ValueError):
        load_settings()


def test_safe_load_settings_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("APP_SETTINGS", "not json")
    monkeypatch.setenv("TDA_API_KEY", "KEY")
    monkeypatch.setenv("MIN_OPEN_INTEREST", "7")
    s = safe_load_settings()
    assert s is not None
    assert s.api_key == "KEY"
    assert s.eligibility_rules().min_open_interest == 7


def test_eligibility_rules_validation():
    assert EligibilityRules(default_multiplier=None).default_multiplier is None
    with pytest.raises(ValidationError):
        EligibilityRules(default_multiplier=0)
    with pytest.raises(ValidationError):
        EligibilityRules(min_open_interest=-1)


@pytest.mark.parametrize("raw", ["", "none", "None", "null", " NULL "])
def test_default_multiplier_can_be_disabled_from_env(monkeypatch, raw):
    monkeypatch.setenv("DEFAULT_MULTIPLIER", raw)
    assert Settings().eligibility_rules().default_multiplier is None


def test_default_multiplier_reads_number_from_env(monkeypatch):
    monkeypatch.setenv("DEFAULT_MULTIPLIER", "10")
    assert Settings().eligibility_rules().default_multiplier == 10.0


def test_safe_load_settings_fallback_keeps_disabled_multiplier(monkeypatch):
    monkeypatch.setenv("APP_SETTINGS", "not json")
    monkeypatch.setenv("DEFAULT_MULTIPLIER", "none")
    s = safe_load_settings()
    assert s is not None
    assert s.DEFAULT_MULTIPLIER is None


def test_safe_load_settings_returns_none_when_unusable(monkeypatch):
    monkeypatch.setenv("MIN_OPEN_INTEREST", "lots")
    assert safe_load_settings() is None
