"""
Bounded top-K selection over option contracts.

Score is `-(mark / days_to_expiration)`: the smallest premium per day ranks first.
That direction is kept as-is from the existing heuristic and is a known quirk
for a premium-selling strategy.
"""
from __future__ import annotations

import heapq
import math
from typing import Iterable

from premium_picker.options.models import ContractRecord


def score(contract: ContractRecord) -> float:
    """
    Higher is better.

    Contracts expiring today (`days_to_expiration == 0`) score -inf, so they rank
    behind every finite score but are never dropped by the ranker itself.
    """
    days = int(contract.days_to_expiration)
    if days <= 0:
        return -math.inf
    return -(float(contract.mark) / days)


def _check_k(k: int) -> int:
    if isinstance(k, bool) or not isinstance(k, int) or k < 1:
        raise ValueError(f"k must be a positive integer, got {k!r}")
    return k


def rank_top(contracts: Iterable[ContractRecord], k: int) -> list[ContractRecord]:
    """
    Return at most `k` contracts, highest score first.

    Contracts stream through a heap bounded at `k` entries keyed on
    `(-score, position)`, so selection is O(n log k) and the input is read once.
    Equal scores come out in input order.
    """
    k = _check_k(k)
    keyed = ((-score(c), i, c) for i, c in enumerate(contracts))
    return [c for _, _, c in heapq.nsmallest(k, keyed)]


def rank_top_sorted(contracts: Iterable[ContractRecord], k: int) -> list[ContractRecord]:
    """Full sort-then-truncate; same selection and order as `rank_top`."""
    k = _check_k(k)
    indexed = list(enumerate(contracts))
    indexed.sort(key=lambda pair: (-score(pair[1]), pair[0]))
    return [c for _, c in indexed[:k]]
