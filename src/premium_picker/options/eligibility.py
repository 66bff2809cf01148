from __future__ import annotations

from typing import Iterable

from premium_picker.options.errors import UnsupportedContractType
from premium_picker.options.models import ContractRecord, Side

MIN_OPEN_INTEREST = 10


def is_eligible(
    contract: ContractRecord,
    *,
    max_budget: float,
    reference_price: float,
    min_open_interest: int = MIN_OPEN_INTEREST,
) -> bool:
    """
    Cash-secured put rules:
    - assignment cost (strike * multiplier) fits the budget
    - open interest meets the liquidity floor
    - strike at or below the underlying's reference price
    """
    if contract.put_call != Side.PUT.value:
        raise UnsupportedContractType(contract.symbol, contract.put_call)
    if contract.collateral > float(max_budget):
        return False
    if contract.open_interest < int(min_open_interest):
        return False
    if contract.strike_price > float(reference_price):
        return False
    return True


def filter_eligible(
    contracts: Iterable[ContractRecord],
    max_budget: float,
    reference_price: float,
    *,
    min_open_interest: int = MIN_OPEN_INTEREST,
) -> list[ContractRecord]:
    """
    Keep the contracts a put seller could write within `max_budget`.

    Order-preserving. Only PUT contracts are supported; a CALL anywhere in the
    input raises `UnsupportedContractType` and no partial result is returned.
    """
    out: list[ContractRecord] = []
    for c in contracts:
        if is_eligible(
            c,
            max_budget=max_budget,
            reference_price=reference_price,
            min_open_interest=min_open_interest,
        ):
            out.append(c)
    return out
