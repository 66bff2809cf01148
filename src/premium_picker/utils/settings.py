"""Centralized settings utilities."""

from __future__ import annotations

import os

from premium_picker.config import NONE_STRINGS, Settings, load_settings


def _env_float(name: str, default: float | None, *, nullable: bool = False) -> float | None:
    raw = os.getenv(name)
    if raw is None:
        return default
    if nullable and raw.strip().lower() in NONE_STRINGS:
        return None
    if raw.strip() == "":
        return default
    return float(raw)


def safe_load_settings() -> Settings | None:
    """
    Load settings with graceful fallback.

    If .env is unreadable (e.g., sandbox), construct Settings directly from environment variables.
    Returns None if settings cannot be constructed.
    """
    try:
        return load_settings()
    except Exception:
        try:
            return Settings.model_construct(
                TDA_API_KEY=os.getenv("TDA_API_KEY", ""),
                TDA_CLIENT_ID=os.getenv("TDA_CLIENT_ID"),
                TDA_REDIRECT_URL=os.getenv("TDA_REDIRECT_URL"),
                TDA_ACCOUNT_ID=os.getenv("TDA_ACCOUNT_ID"),
                TDA_ACCESS_TOKEN=os.getenv("TDA_ACCESS_TOKEN"),
                TDA_BASE_URL=os.getenv("TDA_BASE_URL", "https://api.tdameritrade.com/v1"),
                TDA_TIMEOUT_SECONDS=_env_float("TDA_TIMEOUT_SECONDS", 30.0),
                MIN_OPEN_INTEREST=int(os.getenv("MIN_OPEN_INTEREST", "10")),
                DEFAULT_MULTIPLIER=_env_float("DEFAULT_MULTIPLIER", 100.0, nullable=True),
                SUGGESTION_COUNT=int(os.getenv("SUGGESTION_COUNT", "3")),
                CHAIN_STRIKE_COUNT=int(os.getenv("CHAIN_STRIKE_COUNT", "5")),
                CHAIN_WINDOW_DAYS=int(os.getenv("CHAIN_WINDOW_DAYS", "45")),
            )
        except Exception:
            return None
