"""
TD Ameritrade market-data / account adapter.

Returns decoded payloads only; normalization of the option chain lives in
`premium_picker.options.chain`.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from premium_picker.config import Settings
from premium_picker.options.models import Side

logger = logging.getLogger(__name__)

TDA_BASE = "https://api.tdameritrade.com/v1"


class ProviderError(RuntimeError):
    """Raised when the provider cannot be reached or returns an unusable payload."""


class Quote(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    symbol: str
    last_price: float = Field(alias="lastPrice")
    total_volume: int = Field(default=0, alias="totalVolume")
    exchange: str = ""
    fifty_two_week_high: float | None = Field(default=None, alias="52WkHigh")
    fifty_two_week_low: float | None = Field(default=None, alias="52WkLow")
    cusip: str = ""


class AccountInfo(BaseModel):
    cash_available_for_trading: float


def build_option_chain_params(
    symbol: str,
    side: Side | str,
    start: date,
    end: date,
    *,
    api_key: str,
    strike_count: int = 5,
) -> dict[str, Any]:
    """Query string for `/marketdata/chains`: `strike_count` strikes below the money (SBK)."""
    side = Side.coerce(side)
    return {
        "apikey": api_key,
        "symbol": symbol.strip().upper(),
        "contractType": side.value,
        "strikeCount": int(strike_count),
        "range": "SBK",
        "fromDate": start.isoformat(),
        "toDate": end.isoformat(),
    }


class TDAClient:
    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = TDA_BASE,
        access_token: str | None = None,
        timeout: float = 30.0,
        strike_count: int = 5,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = float(timeout)
        self.strike_count = int(strike_count)
        self.session = session or requests.Session()

    def _get_json(self, path: str, *, params: dict[str, Any] | None = None, headers: dict[str, str] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.info("Calling %s", url)
        try:
            resp = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            logger.error("TDA request failed for %s: %s", url, e)
            raise ProviderError(f"Request to {path} failed: {e}") from e
        except ValueError as e:
            # Body was not JSON.
            raise ProviderError(f"Response from {path} is not JSON") from e
        logger.debug("Got response from %s: %s", url, data)
        return data

    def get_option_chain(self, symbol: str, side: Side | str, start: date, end: date) -> dict[str, Any]:
        """Decoded chain envelope; its `status` is checked by the chain parser."""
        params = build_option_chain_params(
            symbol,
            side,
            start,
            end,
            api_key=self.api_key,
            strike_count=self.strike_count,
        )
        data = self._get_json("/marketdata/chains", params=params)
        if not isinstance(data, dict):
            raise ProviderError(f"Unexpected option chain payload type: {type(data).__name__}")
        return data

    def get_quote(self, symbol: str) -> Quote:
        symbol = symbol.strip().upper()
        data = self._get_json(f"/marketdata/{symbol}/quotes", params={"apikey": self.api_key})
        if not isinstance(data, dict) or symbol not in data:
            raise ProviderError(f"Quote payload has no entry for {symbol}")
        try:
            return Quote.model_validate(data[symbol])
        except ValidationError as e:
            raise ProviderError(f"Invalid quote payload for {symbol}: {e}") from e

    def get_account_info(self, account_id: str) -> AccountInfo:
        if not self.access_token:
            raise ProviderError("An access token is required to read account balances")
        data = self._get_json(
            f"/accounts/{account_id}",
            params={"fields": "positions"},
            headers={"Authorization": f"Bearer {self.access_token}"},
        )
        try:
            account = data["securitiesAccount"]
            balances = account.get("currentBalances") or account.get("currentbalances")
            cash = float(balances["cashAvailableForTrading"])
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ProviderError(f"Account payload for {account_id} has no cashAvailableForTrading") from e
        return AccountInfo(cash_available_for_trading=cash)


def make_client(settings: Settings) -> TDAClient:
    return TDAClient(
        settings.api_key,
        base_url=settings.base_url or TDA_BASE,
        access_token=settings.access_token,
        timeout=settings.timeout_seconds,
        strike_count=settings.chain_strike_count,
    )
