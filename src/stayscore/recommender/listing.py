"""
Quality-ranked property listing (viewer-independent).

This is the "rank by intrinsic merit" flow a listing endpoint runs before it
shapes a response:
1. derive the dataset context once (price bounds, demand ceilings, averages),
2. score every property against that shared context,
3. attach a short label ("Best Value" / "High Demand" / "Recommended"),
4. sort by score (newest first on ties) and cut one page.

The label is what the recommendation ranker later reads as `ai_label`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from typing import Any

from stayscore.config.settings import Settings, get_settings
from stayscore.core.numbers import round_half_up
from stayscore.domain.models import Property, QualityPage, ScoredProperty, ScoringContext, coerce_property
from stayscore.scoring.context import build_context
from stayscore.scoring.quality import calculate_score

logger = logging.getLogger(__name__)

LABEL_BEST_VALUE = "Best Value"
LABEL_HIGH_DEMAND = "High Demand"
LABEL_RECOMMENDED = "Recommended"


def pick_label(p: Property, *, context: ScoringContext, settings: Settings) -> str:
    average_price = round_half_up(context.average_price or 0.0)
    monthly = p.price.usable_monthly
    ratio = settings.listing.best_value_price_ratio
    if average_price > 0 and monthly is not None and monthly < ratio * average_price:
        return LABEL_BEST_VALUE
    if p.views > round_half_up(context.average_views or 0.0):
        return LABEL_HIGH_DEMAND
    return LABEL_RECOMMENDED


def _created_key(p: Property) -> float:
    return p.created_at.timestamp() if p.created_at is not None else 0.0


def rank_by_quality(
    properties: Iterable[Any] | None,
    *,
    page: int = 1,
    limit: int | None = None,
    settings: Settings | None = None,
) -> QualityPage:
    settings = settings or get_settings()
    records = [r for r in (properties or ()) if r is not None]
    context = build_context(records)
    items = [coerce_property(r) for r in records]

    scored = [
        ScoredProperty(
            property=p,
            score=calculate_score(p, context, settings=settings),
            ai_label=pick_label(p, context=context, settings=settings),
        )
        for p in items
    ]
    scored.sort(key=lambda s: (s.score, _created_key(s.property)), reverse=True)

    page_size = max(1, int(limit or settings.listing.default_page_size))
    total = len(scored)
    total_pages = max(1, math.ceil(total / page_size))
    safe_page = min(max(int(page or 1), 1), total_pages)
    start = (safe_page - 1) * page_size

    logger.debug("Quality listing: total=%d page=%d/%d", total, safe_page, total_pages)
    return QualityPage(
        properties=scored[start : start + page_size],
        total=total,
        total_pages=total_pages,
        page=safe_page,
        average_price=round_half_up(context.average_price or 0.0),
        max_price=context.max_price or 0.0,
        views_threshold=round_half_up(context.average_views or 0.0),
    )
