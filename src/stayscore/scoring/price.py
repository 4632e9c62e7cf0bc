"""
Price feature (property-level).

Turns a monthly price into a 0..1 affordability score (cheaper -> closer to 1).
Strategies are tried in order and the first applicable one wins:

1. `range`: min/max price of the current dataset, linear.
2. `reference`: a caller-supplied reference price on the curve `ref / (price + ref)`,
   so price == reference scores exactly 0.5.
3. `default_reference`: the same curve with the configured default reference.
4. `neutral`: no usable price at all.
"""

from __future__ import annotations

from stayscore.config.settings import Settings
from stayscore.core.numbers import clamp01
from stayscore.domain.models import ScoringContext


def _curve(price: float, reference: float) -> float:
    return clamp01(reference / (price + reference))


def score_price(
    monthly: float | None, *, context: ScoringContext | None, settings: Settings
) -> tuple[float, dict, list[str]]:
    cfg = settings.quality
    ctx = context or ScoringContext()

    if monthly is None or monthly <= 0:
        details = {"strategy": "neutral", "monthly": None}
        return clamp01(cfg.neutral_price_score), details, ["No usable monthly price"]

    if ctx.has_price_range:
        lo = float(ctx.min_price)  # type: ignore[arg-type]
        hi = float(ctx.max_price)  # type: ignore[arg-type]
        score = clamp01(1.0 - (monthly - lo) / (hi - lo))
        details = {"strategy": "range", "monthly": monthly, "min_price": lo, "max_price": hi}
    elif ctx.reference_price is not None and ctx.reference_price > 0:
        score = _curve(monthly, ctx.reference_price)
        details = {"strategy": "reference", "monthly": monthly, "reference_price": ctx.reference_price}
    else:
        reference = float(cfg.default_reference_price)
        score = _curve(monthly, reference)
        details = {"strategy": "default_reference", "monthly": monthly, "reference_price": reference}

    if score >= 0.66:
        reasons = ["Priced below comparable listings"]
    elif score >= 0.33:
        reasons = ["Priced in line with comparable listings"]
    else:
        reasons = ["Priced above comparable listings"]
    return score, details, reasons
