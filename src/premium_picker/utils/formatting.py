from __future__ import annotations

from typing import Any


def fmt_usd(x: Any, *, decimals: int = 2) -> str:
    """Format a dollar amount; "n/a" when the value is not numeric."""
    if not isinstance(x, (int, float)):
        return "n/a"
    return f"${float(x):,.{decimals}f}"


def fmt_int(x: Any) -> str:
    if not isinstance(x, (int, float)):
        return "n/a"
    return f"{int(x):,}"


def fmt_score(x: Any) -> str:
    if not isinstance(x, (int, float)):
        return "n/a"
    if x == float("-inf"):
        return "-inf"
    return f"{float(x):.4f}"
