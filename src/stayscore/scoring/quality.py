"""
Property quality score (viewer-independent).

Combines four 0..1 sub-scores with fixed weights into an integer 0..100:

    0.35 * rating + 0.25 * price + 0.25 * demand + 0.15 * availability

Rounding policy: half-up (70.5 -> 71), applied once to the clamped total.

The calculator is total. Records are resolved through `coerce_property`, and any
missing or non-numeric field contributes its documented default instead of
raising, so a malformed listing simply receives a conservative score.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from stayscore.config.settings import Settings, get_settings
from stayscore.core.numbers import clamp01, round_half_up
from stayscore.domain.models import (
    Property,
    QualityBreakdown,
    ScoreComponent,
    ScoringContext,
    coerce_property,
)
from stayscore.scoring.availability import score_availability
from stayscore.scoring.composite import normalize_weights
from stayscore.scoring.demand import score_demand
from stayscore.scoring.price import score_price

logger = logging.getLogger(__name__)


def coerce_context(context: ScoringContext | Mapping[str, Any] | None) -> ScoringContext | None:
    """Accept a typed context or a plain mapping (camelCase or snake_case keys)."""
    if context is None or isinstance(context, ScoringContext):
        return context
    if not isinstance(context, Mapping):
        return None
    try:
        return ScoringContext.model_validate(context)
    except ValidationError as exc:
        logger.debug("Ignoring malformed scoring context: %s", exc)
        return None


def _effective_weights(settings: Settings) -> dict[str, float]:
    weights = {k: float(v) for k, v in settings.quality.weights.items()}
    # Configured weights normally sum to 1.0 already; only renormalize real drift.
    if abs(sum(weights.values()) - 1.0) > 1e-9:
        weights = normalize_weights(weights)
    return weights


def _rating_component(rating: float | None, settings: Settings) -> tuple[float, dict, list[str]]:
    value = rating if rating is not None else 0.0
    score = clamp01(value / float(settings.quality.rating_scale))
    if rating is None:
        reasons = ["Not rated yet"]
    else:
        reasons = [f"Rated {value:.1f} / {settings.quality.rating_scale:g}"]
    return score, {"rating": rating}, reasons


def explain_score(
    prop: Property | Mapping[str, Any],
    context: ScoringContext | Mapping[str, Any] | None = None,
    *,
    settings: Settings | None = None,
) -> QualityBreakdown:
    """Score one property and return the per-component breakdown."""
    settings = settings or get_settings()
    p = coerce_property(prop)
    ctx = coerce_context(context)
    weights = _effective_weights(settings)

    r_score, r_details, r_reasons = _rating_component(p.rating, settings)
    p_score, p_details, p_reasons = score_price(p.price.usable_monthly, context=ctx, settings=settings)
    d_score, d_details, d_reasons = score_demand(p.views, p.bookings_count, context=ctx, settings=settings)
    a_score = score_availability(p.availability, settings=settings)

    parts = [
        ("rating", r_score, r_details, r_reasons),
        ("price", p_score, p_details, p_reasons),
        ("demand", d_score, d_details, d_reasons),
        ("availability", a_score, {"availability": p.availability}, [f"Status: {p.availability or 'unknown'}"]),
    ]
    components = [
        ScoreComponent(
            name=name,
            score=clamp01(score),
            weight=clamp01(weights.get(name, 0.0)),
            contribution=clamp01(score * weights.get(name, 0.0)),
            details=details,
            reasons=reasons,
        )
        for name, score, details, reasons in parts
    ]

    combined = clamp01(sum(c.contribution for c in components))
    total = round_half_up(combined * 100)
    return QualityBreakdown(property_id=p.id, total_score=total, components=components)


def calculate_score(
    prop: Property | Mapping[str, Any],
    context: ScoringContext | Mapping[str, Any] | None = None,
    *,
    settings: Settings | None = None,
) -> int:
    """Return the 0..100 quality score for one property."""
    return explain_score(prop, context, settings=settings).total_score
