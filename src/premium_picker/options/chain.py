"""
Flatten the provider's nested option chain into `ContractRecord`s.

The provider nests contracts as:

    putExpDateMap / callExpDateMap
        "2024-01-19:10"          expiration date + days-to-expiration suffix
            "30.0"               strike
                [ {entry} ]      exactly one quote per (expiration, strike)

Anything else is a data-integrity fault: the parse aborts with
`MalformedChainEntry` instead of guessing which entry to keep.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping

from pydantic import ValidationError

from premium_picker.options.errors import InvalidResponseStatus, MalformedChainEntry
from premium_picker.options.models import (
    SUCCESS_STATUS,
    ContractRecord,
    RawChainResponse,
    RawOptionEntry,
    Side,
)

logger = logging.getLogger(__name__)

_MAP_ALIASES = {"putExpDateMap", "callExpDateMap", "put_exp_date_map", "call_exp_date_map"}


def _malformed_from_validation(
    err: ValidationError, side: Side, *, prefix: tuple[str, ...] = ()
) -> MalformedChainEntry:
    first = err.errors()[0]
    loc = prefix + tuple(first.get("loc", ()))
    expiration = strike = None
    if len(loc) >= 3 and loc[0] in _MAP_ALIASES:
        expiration, strike = str(loc[1]), str(loc[2])
    field = ".".join(str(p) for p in loc)
    return MalformedChainEntry(
        f"Invalid chain payload at {field}: {first.get('msg', 'validation error')}",
        side=side.value,
        expiration=expiration,
        strike=strike,
    )


def _load_response(raw: RawChainResponse | Mapping[str, Any], side: Side) -> RawChainResponse:
    if isinstance(raw, RawChainResponse):
        response = raw
    elif isinstance(raw, Mapping):
        # Status is checked before validating the body: a failed call usually has no maps.
        status = raw.get("status")
        if status != SUCCESS_STATUS:
            raise InvalidResponseStatus(status)
        try:
            response = RawChainResponse.model_validate(raw)
        except ValidationError as e:
            raise _malformed_from_validation(e, side) from e
    else:
        raise TypeError(f"Expected a decoded chain mapping, got {type(raw).__name__}")

    if not response.ok:
        raise InvalidResponseStatus(response.status)
    return response


def _expiration_date(key: str, side: Side) -> date:
    # "2024-01-19:10" -> "2024-01-19"; the suffix duplicates daysToExpiration.
    text, _, _ = key.partition(":")
    try:
        return date.fromisoformat(text.strip())
    except ValueError as e:
        raise MalformedChainEntry(f"Unparseable expiration key {key!r}", side=side.value, expiration=key) from e


def _multiplier(
    entry: RawOptionEntry,
    default_multiplier: float | None,
    *,
    side: Side,
    expiration: str,
    strike: str,
) -> float:
    if entry.multiplier is None:
        if default_multiplier is None:
            raise MalformedChainEntry(
                f"Contract {entry.symbol} has no multiplier",
                side=side.value,
                expiration=expiration,
                strike=strike,
            )
        return float(default_multiplier)
    if entry.multiplier <= 0:
        raise MalformedChainEntry(
            f"Contract {entry.symbol} has non-positive multiplier {entry.multiplier}",
            side=side.value,
            expiration=expiration,
            strike=strike,
        )
    return float(entry.multiplier)


def parse_chain(
    raw: RawChainResponse | Mapping[str, Any],
    side: Side | str,
    *,
    default_multiplier: float | None = 100.0,
) -> list[ContractRecord]:
    """
    Flatten one side of a decoded chain response.

    Args:
        raw: decoded provider payload (mapping) or an already validated `RawChainResponse`
        side: PUT or CALL; selects `putExpDateMap` or `callExpDateMap`
        default_multiplier: contract size for entries without `multiplier`;
            None makes a missing multiplier a `MalformedChainEntry`

    Returns:
        One record per (expiration, strike) pair. Order is not meaningful.

    Raises:
        UnsupportedSide, InvalidResponseStatus, MalformedChainEntry
    """
    side = Side.coerce(side)
    response = _load_response(raw, side)

    map_name = "putExpDateMap" if side is Side.PUT else "callExpDateMap"
    try:
        date_map = response.date_map(side)
    except ValidationError as e:
        raise _malformed_from_validation(e, side, prefix=(map_name,)) from e

    out: list[ContractRecord] = []
    for exp_key, by_strike in date_map.items():
        expiration = _expiration_date(exp_key, side)
        for strike_key, entries in by_strike.items():
            if len(entries) != 1:
                logger.error(
                    "Invalid number of options for %s %s strike=%s: %d",
                    side.value,
                    exp_key,
                    strike_key,
                    len(entries),
                )
                raise MalformedChainEntry(
                    f"Expected exactly one contract, got {len(entries)}",
                    side=side.value,
                    expiration=exp_key,
                    strike=strike_key,
                )
            entry = entries[0]
            out.append(
                ContractRecord(
                    symbol=entry.symbol,
                    put_call=(entry.put_call or side.value).upper(),
                    strike_price=float(entry.strike_price),
                    expiration_date=expiration,
                    bid=float(entry.bid),
                    ask=float(entry.ask),
                    mark=float(entry.mark),
                    bid_size=int(entry.bid_size),
                    ask_size=int(entry.ask_size),
                    open_interest=int(entry.open_interest),
                    days_to_expiration=int(entry.days_to_expiration),
                    multiplier=_multiplier(
                        entry,
                        default_multiplier,
                        side=side,
                        expiration=exp_key,
                        strike=strike_key,
                    ),
                )
            )

    # numberOfContracts is only a hint and often counts both sides.
    if response.number_of_contracts != len(out):
        logger.debug(
            "Declared %d contracts for %s, parsed %d %s contracts",
            response.number_of_contracts,
            response.symbol or "?",
            len(out),
            side.value,
        )
    return out
