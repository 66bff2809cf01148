from __future__ import annotations

from typing import Any


class ChainError(RuntimeError):
    """Base error for option chain parsing and suggestion faults."""


class InvalidResponseStatus(ChainError):
    """Raised when the provider envelope does not carry the success status."""

    def __init__(self, status: Any) -> None:
        self.status = status
        super().__init__(f"Provider returned status={status!r}, expected 'SUCCESS'")


class MalformedChainEntry(ChainError):
    """Raised when a chain entry breaks the one-contract-per-strike shape."""

    def __init__(
        self,
        message: str,
        *,
        side: str | None = None,
        expiration: str | None = None,
        strike: str | None = None,
    ) -> None:
        self.side = side
        self.expiration = expiration
        self.strike = strike
        where = "/".join(str(p) for p in (side, expiration, strike) if p is not None)
        super().__init__(f"{message} ({where})" if where else message)


class UnsupportedSide(ChainError, ValueError):
    """Raised when the requested side is neither PUT nor CALL."""

    def __init__(self, side: Any) -> None:
        self.side = side
        super().__init__(f"Unknown value for side: {side!r}")


class UnsupportedContractType(ChainError, ValueError):
    """Raised when the eligibility filter receives a contract it has no rules for."""

    def __init__(self, symbol: str, put_call: str) -> None:
        self.symbol = symbol
        self.put_call = put_call
        super().__init__(f"Unsupported option {symbol} ({put_call}); only PUT contracts are supported")
