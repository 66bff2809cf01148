"""
Pytest configuration and shared fixtures for premium_picker tests.

Usage:
    @pytest.fixture functions are automatically available to all tests.
    Import helpers from conftest when needed.
"""
import sys
from datetime import date
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest


def pytest_configure():
    """
    Ensure `src/` is on sys.path for the src-layout package import (`premium_picker`).
    This keeps tests runnable without requiring an editable install.
    """
    root = Path(__file__).resolve().parents[1]
    src = root / "src"
    if src.exists():
        sys.path.insert(0, str(src))


# =============================================================================
# Chain payload helpers
# =============================================================================

def make_entry(
    symbol: str = "SPY_011924P30",
    *,
    strike: float = 30.0,
    mark: float = 1.0,
    days: int = 20,
    oi: int = 50,
    put_call: str = "PUT",
    bid: float | None = None,
    ask: float | None = None,
    multiplier: float | None = 100.0,
) -> dict[str, Any]:
    """
    Build one raw contract entry the way the provider sends it.

    Usage:
        entry = make_entry("X1", strike=40.0, mark=0.4, days=10)
    """
    entry: dict[str, Any] = {
        "symbol": symbol,
        "putCall": put_call,
        "bid": mark - 0.05 if bid is None else bid,
        "bidSize": 10,
        "ask": mark + 0.05 if ask is None else ask,
        "askSize": 12,
        "mark": mark,
        "openInterest": oi,
        "strikePrice": strike,
        "daysToExpiration": days,
    }
    if multiplier is not None:
        entry["multiplier"] = multiplier
    return entry


def make_chain_payload(
    entries_by_expiration: dict[str, list[dict[str, Any]]],
    *,
    side: str = "PUT",
    status: str = "SUCCESS",
    symbol: str = "SPY",
    underlying_price: float = 50.0,
    declared: int | None = None,
) -> dict[str, Any]:
    """
    Build a decoded chain envelope. Each expiration key gets the `:<dte>` suffix
    taken from its first entry, each entry gets its own strike key.

    Usage:
        payload = make_chain_payload({"2024-01-19": [make_entry(strike=30.0)]})
    """
    date_map: dict[str, dict[str, list[dict[str, Any]]]] = {}
    count = 0
    for exp, entries in entries_by_expiration.items():
        dte = entries[0]["daysToExpiration"] if entries else 0
        by_strike: dict[str, list[dict[str, Any]]] = {}
        for e in entries:
            by_strike[str(float(e["strikePrice"]))] = [e]
            count += 1
        date_map[f"{exp}:{dte}"] = by_strike

    empty: dict[str, Any] = {}
    return {
        "symbol": symbol,
        "status": status,
        "underlyingPrice": underlying_price,
        "numberOfContracts": count if declared is None else declared,
        "putExpDateMap": date_map if side == "PUT" else empty,
        "callExpDateMap": date_map if side == "CALL" else empty,
    }


@pytest.fixture
def scenario_payload() -> dict[str, Any]:
    """
    Two expirations x two strikes of PUTs around a $50 underlying.

    A: strike 30, mark 1.0, 20 days, OI 50  -> score -0.05
    B: strike 40, mark 0.4, 10 days, OI 20  -> score -0.04
    C: strike 60 (above the underlying)
    D: strike 20, OI 5 (below the liquidity floor)
    """
    return make_chain_payload(
        {
            "2024-01-19": [
                make_entry("A", strike=30.0, mark=1.0, days=20, oi=50),
                make_entry("C", strike=60.0, mark=11.0, days=20, oi=500),
            ],
            "2024-01-09": [
                make_entry("B", strike=40.0, mark=0.4, days=10, oi=20),
                make_entry("D", strike=20.0, mark=0.1, days=10, oi=5),
            ],
        }
    )


@pytest.fixture
def scenario_expirations() -> dict[str, date]:
    return {"A": date(2024, 1, 19), "B": date(2024, 1, 9), "C": date(2024, 1, 19), "D": date(2024, 1, 9)}


# =============================================================================
# Mock HTTP session
# =============================================================================

def make_response(payload: Any, *, status_code: int = 200) -> MagicMock:
    """Mock `requests.Response` with `.json()` and `.raise_for_status()`."""
    import requests

    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    else:
        resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def mock_session() -> MagicMock:
    """Mock `requests.Session`; set `session.get.return_value` / `side_effect` per test."""
    return MagicMock()
