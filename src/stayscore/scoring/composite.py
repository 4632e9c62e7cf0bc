"""
Shared scoring utilities.

Small, reusable helpers used by the quality calculator:
- `normalize_weights`: convert arbitrary non-negative weights into a 1.0-summing distribution
"""

from __future__ import annotations

from stayscore.core.numbers import safe_float


def normalize_weights(weights: dict[str, float]) -> dict[str, float]:
    """Normalize a dict of weights so they sum to 1.0 (non-negative)."""
    cleaned = {k: max(0.0, safe_float(v)) for k, v in weights.items()}
    total = sum(cleaned.values())
    if total <= 0:
        return {k: 1.0 / len(weights) for k in weights}
    return {k: v / total for k, v in cleaned.items()}

