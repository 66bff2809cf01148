"""
Option chain normalization and suggestion ranking.

Pipeline: raw provider payload -> `parse_chain` -> `filter_eligible` -> `rank_top`.
Every step is a pure function over its inputs; nothing is cached between calls.
"""

from premium_picker.options.chain import parse_chain
from premium_picker.options.eligibility import filter_eligible
from premium_picker.options.errors import (
    ChainError,
    InvalidResponseStatus,
    MalformedChainEntry,
    UnsupportedContractType,
    UnsupportedSide,
)
from premium_picker.options.models import ContractRecord, RawChainResponse, RawOptionEntry, Side
from premium_picker.options.ranking import rank_top, score
from premium_picker.options.suggest import build_payload, suggest, suggest_from_contracts

__all__ = [
    "ChainError",
    "ContractRecord",
    "InvalidResponseStatus",
    "MalformedChainEntry",
    "RawChainResponse",
    "RawOptionEntry",
    "Side",
    "UnsupportedContractType",
    "UnsupportedSide",
    "build_payload",
    "filter_eligible",
    "parse_chain",
    "rank_top",
    "score",
    "suggest",
    "suggest_from_contracts",
]
