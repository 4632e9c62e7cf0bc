"""
Demand feature (property-level).

Views and bookings are each compressed with `log1p` against a ceiling and then
averaged, so one viral listing cannot dominate the whole ranking.
"""

from __future__ import annotations

import math

from stayscore.config.settings import Settings
from stayscore.core.numbers import clamp01
from stayscore.domain.models import ScoringContext


def _ceiling(value: float | None, default: float) -> float:
    if value is None or value <= 0:
        value = default
    return max(1.0, float(value))


def _log_ratio(count: float, ceiling: float) -> float:
    return clamp01(math.log1p(max(0.0, count)) / math.log1p(ceiling))


def score_demand(
    views: int, bookings_count: int, *, context: ScoringContext | None, settings: Settings
) -> tuple[float, dict, list[str]]:
    cfg = settings.quality
    ctx = context or ScoringContext()

    max_views = _ceiling(ctx.max_views, cfg.default_max_views)
    max_bookings = _ceiling(ctx.max_bookings_count, cfg.default_max_bookings_count)

    views_score = _log_ratio(views, max_views)
    bookings_score = _log_ratio(bookings_count, max_bookings)
    score = clamp01((views_score + bookings_score) / 2)

    reasons: list[str] = []
    if views == 0 and bookings_count == 0:
        reasons.append("No recorded interest yet")
    else:
        reasons.append(f"{views} views, {bookings_count} bookings")

    details = {
        "views": views,
        "bookings_count": bookings_count,
        "max_views": max_views,
        "max_bookings_count": max_bookings,
        "views_score": views_score,
        "bookings_score": bookings_score,
    }
    return score, details, reasons
