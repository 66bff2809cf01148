from __future__ import annotations

from typing import Any, Iterable, Mapping

from premium_picker.config import EligibilityRules
from premium_picker.options.chain import parse_chain
from premium_picker.options.eligibility import filter_eligible
from premium_picker.options.models import ContractRecord, RawChainResponse, Side
from premium_picker.options.ranking import rank_top

DEFAULT_SUGGESTION_COUNT = 3


def suggest(
    raw: RawChainResponse | Mapping[str, Any],
    side: Side | str,
    max_budget: float,
    reference_price: float,
    k: int = DEFAULT_SUGGESTION_COUNT,
    *,
    rules: EligibilityRules | None = None,
) -> list[ContractRecord]:
    """
    Parse -> filter -> rank. Faults from any stage propagate unchanged.
    """
    rules = rules or EligibilityRules()
    contracts = parse_chain(raw, side, default_multiplier=rules.default_multiplier)
    return suggest_from_contracts(contracts, max_budget, reference_price, k, rules=rules)


def suggest_from_contracts(
    contracts: Iterable[ContractRecord],
    max_budget: float,
    reference_price: float,
    k: int = DEFAULT_SUGGESTION_COUNT,
    *,
    rules: EligibilityRules | None = None,
) -> list[ContractRecord]:
    """Filter -> rank over an already parsed chain."""
    rules = rules or EligibilityRules()
    eligible = filter_eligible(
        contracts,
        max_budget,
        reference_price,
        min_open_interest=rules.min_open_interest,
    )
    return rank_top(eligible, k)


def _quote_json(quote: Any) -> Any:
    if quote is None:
        return None
    if hasattr(quote, "model_dump"):
        return quote.model_dump(mode="json", by_alias=True)
    return dict(quote)


def build_payload(
    quote: Any,
    chain: Iterable[ContractRecord],
    suggestions: Iterable[ContractRecord],
) -> dict[str, Any]:
    """JSON payload served to the page: quote + full chain + suggestions."""
    return {
        "quote": _quote_json(quote),
        "chain": [c.to_json() for c in chain],
        "suggestions": [c.to_json() for c in suggestions],
    }
