"""
Dataset-relative scoring context.

`build_context` scans a property collection once and derives the bounds the
price and demand scorers normalize against:
- min/max/average monthly price over listings with a usable (finite, positive) price
- max views / max bookings (floored at 1 so log ratios stay defined)
- average views over listings with a numeric view count (used by the quality listing
  to flag high demand)

The reference price is the rounded average price, so a listing priced at the
dataset average lands at 0.5 on the price curve when no range is available
(e.g., every listing has the same price).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from stayscore.core.numbers import optional_float, round_half_up
from stayscore.domain.models import Property, ScoringContext, coerce_property

logger = logging.getLogger(__name__)


def _has_view_count(record: Any) -> bool:
    if isinstance(record, Property):
        return True
    return isinstance(record, Mapping) and optional_float(record.get("views")) is not None


def build_context(properties: Iterable[Any]) -> ScoringContext:
    min_price: float | None = None
    max_price: float | None = None
    price_total = 0.0
    price_count = 0
    views_total = 0
    views_count = 0
    max_views = 0
    max_bookings = 0
    count = 0

    for record in properties or ():
        if record is None:
            continue
        p = coerce_property(record)
        count += 1

        monthly = p.price.usable_monthly
        if monthly is not None:
            min_price = monthly if min_price is None else min(min_price, monthly)
            max_price = monthly if max_price is None else max(max_price, monthly)
            price_total += monthly
            price_count += 1

        if _has_view_count(record):
            views_total += p.views
            views_count += 1
        max_views = max(max_views, p.views)
        max_bookings = max(max_bookings, p.bookings_count)

    average_price = price_total / price_count if price_count else None
    context = ScoringContext(
        min_price=min_price,
        max_price=max_price,
        reference_price=round_half_up(average_price) if average_price else None,
        max_views=max(1, max_views),
        max_bookings_count=max(1, max_bookings),
        average_price=average_price,
        average_views=views_total / views_count if views_count else None,
    )
    logger.debug("Built scoring context from %d properties: %s", count, context)
    return context
