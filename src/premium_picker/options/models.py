"""
Normalized option contracts and the provider payload they are built from.

The provider groups contracts as `side map -> "YYYY-MM-DD:<dte>" -> "<strike>" -> [entry]`.
`RawChainResponse` / `RawOptionEntry` describe that decoded payload; `ContractRecord`
is the flat, immutable shape the rest of the engine works with.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from premium_picker.options.errors import UnsupportedSide

SUCCESS_STATUS = "SUCCESS"


class Side(str, Enum):
    """Option side, spelled the way the provider spells `putCall`."""
    PUT = "PUT"
    CALL = "CALL"

    @classmethod
    def coerce(cls, value: Any) -> "Side":
        if isinstance(value, Side):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise UnsupportedSide(value)


class RawOptionEntry(BaseModel):
    """One contract quote as the provider sends it."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    symbol: str
    put_call: str = Field(default="", alias="putCall")
    bid: float = Field(default=0.0, ge=0)
    bid_size: int = Field(default=0, ge=0, alias="bidSize")
    ask: float = Field(default=0.0, ge=0)
    ask_size: int = Field(default=0, ge=0, alias="askSize")
    mark: float = Field(default=0.0, ge=0)
    open_interest: int = Field(default=0, ge=0, alias="openInterest")
    strike_price: float = Field(gt=0, alias="strikePrice")
    days_to_expiration: int = Field(ge=0, alias="daysToExpiration")
    # Some contract shapes leave this out entirely.
    multiplier: float | None = None


class RawChainResponse(BaseModel):
    """Decoded option chain envelope."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    symbol: str = ""
    status: str
    underlying_price: float | None = Field(default=None, alias="underlyingPrice")
    number_of_contracts: int = Field(default=0, alias="numberOfContracts")
    # Side maps stay undecoded until one is selected: a bad CALL entry must not fail a PUT parse.
    put_exp_date_map: dict[str, Any] = Field(default_factory=dict, alias="putExpDateMap")
    call_exp_date_map: dict[str, Any] = Field(default_factory=dict, alias="callExpDateMap")

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS_STATUS

    def date_map(self, side: Side) -> DateMap:
        """Validate and return one side map; raises `pydantic.ValidationError` on bad entries."""
        raw = self.put_exp_date_map if side is Side.PUT else self.call_exp_date_map
        return _DATE_MAP.validate_python(raw)


DateMap = dict[str, dict[str, list[RawOptionEntry]]]
_DATE_MAP: TypeAdapter[DateMap] = TypeAdapter(DateMap)


@dataclass(frozen=True)
class ContractRecord:
    symbol: str
    put_call: str
    strike_price: float
    expiration_date: date
    bid: float
    ask: float
    mark: float
    bid_size: int
    ask_size: int
    open_interest: int
    days_to_expiration: int
    multiplier: float

    @property
    def collateral(self) -> float:
        """Cash required to take assignment of one contract."""
        return self.strike_price * self.multiplier

    def to_json(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "putcall": self.put_call,
            "strikePrice": self.strike_price,
            "date": self.expiration_date.isoformat(),
            "bid": self.bid,
            "bidSize": self.bid_size,
            "ask": self.ask,
            "askSize": self.ask_size,
            "mark": self.mark,
            "multiplier": self.multiplier,
            "openInterest": self.open_interest,
            "daysToExpiration": self.days_to_expiration,
        }
