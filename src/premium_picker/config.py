from __future__ import annotations

import json
import os
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

NONE_STRINGS = frozenset({"", "none", "null"})


def none_if_blank(value: Any) -> Any:
    if isinstance(value, str) and value.strip().lower() in NONE_STRINGS:
        return None
    return value


class EligibilityRules(BaseModel):
    # Liquidity floor applied by the eligibility filter.
    min_open_interest: int = Field(default=10, ge=0)
    # Contract size used when the provider omits `multiplier`.
    # None turns a missing multiplier into a parse error instead.
    default_multiplier: float | None = Field(default=100.0, gt=0)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    TDA_API_KEY: str = ""
    TDA_CLIENT_ID: str | None = None
    TDA_REDIRECT_URL: str | None = None
    TDA_ACCOUNT_ID: str | None = None
    TDA_ACCESS_TOKEN: str | None = None
    TDA_BASE_URL: str = "https://api.tdameritrade.com/v1"
    TDA_TIMEOUT_SECONDS: float = 30.0

    MIN_OPEN_INTEREST: int = 10
    DEFAULT_MULTIPLIER: float | None = 100.0
    SUGGESTION_COUNT: int = 3
    # Chain request window: strikes around the money and days ahead of today.
    CHAIN_STRIKE_COUNT: int = 5
    CHAIN_WINDOW_DAYS: int = 45

    @field_validator("DEFAULT_MULTIPLIER", mode="before")
    @classmethod
    def _multiplier_none(cls, v: Any) -> Any:
        # Environment values are strings; "", "none" and "null" all mean "no default".
        return none_if_blank(v)

    @property
    def api_key(self) -> str:
        return self.TDA_API_KEY

    @property
    def client_id(self) -> str | None:
        return self.TDA_CLIENT_ID

    @property
    def redirect_url(self) -> str | None:
        return self.TDA_REDIRECT_URL

    @property
    def account_id(self) -> str | None:
        return self.TDA_ACCOUNT_ID

    @property
    def access_token(self) -> str | None:
        return self.TDA_ACCESS_TOKEN

    @property
    def base_url(self) -> str:
        return (self.TDA_BASE_URL or "").rstrip("/")

    @property
    def timeout_seconds(self) -> float:
        return float(self.TDA_TIMEOUT_SECONDS)

    @property
    def suggestion_count(self) -> int:
        return int(self.SUGGESTION_COUNT)

    @property
    def chain_strike_count(self) -> int:
        return int(self.CHAIN_STRIKE_COUNT)

    @property
    def chain_window_days(self) -> int:
        return int(self.CHAIN_WINDOW_DAYS)

    def eligibility_rules(self) -> EligibilityRules:
        return EligibilityRules(
            min_open_interest=self.MIN_OPEN_INTEREST,
            default_multiplier=self.DEFAULT_MULTIPLIER,
        )


def _app_settings_overrides() -> dict[str, str]:
    """
    Read the optional `APP_SETTINGS` JSON blob used for local runs.

    Only the OAuth app fields are honoured; anything else in the blob is ignored.
    """
    raw = os.getenv("APP_SETTINGS")
    if not raw:
        return {}
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("APP_SETTINGS must be a JSON object")
    out: dict[str, str] = {}
    if data.get("tda_client_id"):
        out["TDA_CLIENT_ID"] = str(data["tda_client_id"])
    if data.get("tda_redirect_url"):
        out["TDA_REDIRECT_URL"] = str(data["tda_redirect_url"])
    return out


def load_settings() -> Settings:
    return Settings(**_app_settings_overrides())
