from __future__ import annotations

# Personalized "AI recommended" ranking.
#
# There is no model here: the match percent is a transparent additive heuristic
# over the viewer's context, kept separate from the viewer-independent quality score:
# - recent search intent (city equality, free-text containment)
# - favorite membership
# - demand/value flags (external `ai_label` or simple thresholds)
# - a stable per-id jitter so ties break the same way in every process
#
# The raw integer is clamped into a "confident but not absolute" band (55..96)
# and mapped to a cue label, a reason tag and a one-sentence explanation.

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from stayscore.config.settings import RecommendationSettings, Settings, get_settings
from stayscore.core.numbers import clamp, round_half_up
from stayscore.domain.models import (
    Property,
    RankOptions,
    RecommendationResult,
    SearchIntent,
    coerce_property,
    normalize_text,
)
from stayscore.recommender.intent import SearchIntentStore

logger = logging.getLogger(__name__)

REASON_FAVORITE = "Because you favorited similar homes"
REASON_SEARCH = "Based on your searches"
REASON_POPULAR = "Popular with similar users"
REASON_VALUE = "Great value for your budget"
REASON_DEFAULT = "Smart Match"


@dataclass(frozen=True)
class MatchSignals:
    """Which heuristic signals fired for one property."""

    has_search: bool
    city_match: bool
    query_match: bool
    is_favorite: bool
    is_high_demand: bool
    is_best_value: bool
    jitter: int


def stable_jitter(identifier: str, *, modulus: int = 97, spread: int = 7) -> int:
    """Deterministic 0..spread-1 tie breaker for an id string.

    h = (h * 31 + unit) mod `modulus` over the id's UTF-16 code units, starting at 0,
    then h mod `spread`. UTF-16 units keep the value identical to a JS client's charCodeAt loop.
    """
    data = str(identifier or "").encode("utf-16-le", errors="surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) % modulus
    return h % spread


def _detect_signals(
    p: Property, *, intent: SearchIntent, favorite_ids: frozenset[str], cfg: RecommendationSettings
) -> MatchSignals:
    city = normalize_text(p.address.city)
    title = normalize_text(p.title)
    description = normalize_text(p.description)
    label = normalize_text(p.ai_label)

    city_match = bool(intent.city) and city == intent.city
    query_match = bool(intent.query) and (
        intent.query in title or intent.query in description or intent.query in city
    )
    return MatchSignals(
        has_search=not intent.is_empty,
        city_match=city_match,
        query_match=query_match,
        is_favorite=bool(p.id) and p.id in favorite_ids,
        is_high_demand="high demand" in label or p.views > cfg.high_demand_views_threshold,
        is_best_value="best value" in label or p.price.usable_monthly is not None,
        jitter=stable_jitter(p.id, modulus=cfg.jitter_modulus, spread=cfg.jitter_range),
    )


def _raw_score(signals: MatchSignals, cfg: RecommendationSettings) -> int:
    points = cfg.points
    score = 0
    if signals.city_match:
        score += points.city_match
    if signals.query_match:
        score += points.query_match
    if signals.is_favorite:
        score += points.favorite
    if signals.is_high_demand:
        score += points.high_demand
    if signals.is_best_value:
        score += points.best_value
    return score + signals.jitter


def pick_cue(match_percent: int, cfg: RecommendationSettings) -> tuple[str, str]:
    for band in cfg.cue_bands:
        if match_percent >= band.min_percent:
            return band.label, band.tone
    last = cfg.cue_bands[-1] if cfg.cue_bands else None
    return (last.label, last.tone) if last else ("", "")


def pick_reason(signals: MatchSignals) -> str:
    if signals.is_favorite:
        return REASON_FAVORITE
    if signals.has_search and signals.city_match:
        return REASON_SEARCH
    if signals.is_high_demand:
        return REASON_POPULAR
    if signals.is_best_value:
        return REASON_VALUE
    return REASON_DEFAULT


def build_explanation(signals: MatchSignals, p: Property) -> str:
    if signals.is_favorite:
        return "Recommended because it resembles homes you have favorited."
    if signals.has_search and signals.city_match:
        return f"Recommended because you viewed or searched similar properties in {p.address.city or 'this city'}."
    if signals.has_search and signals.query_match:
        return "Recommended because it matches your recent search intent."
    if signals.is_high_demand:
        return "Recommended because it's trending based on recent interest."
    if signals.is_best_value:
        return "Recommended because it offers strong value for its price."
    return "Recommended by a smart heuristic match (value + popularity signals)."


def score_recommendation(
    record: Property | Mapping[str, Any],
    *,
    intent: SearchIntent,
    favorite_ids: frozenset[str] = frozenset(),
    preview: bool = False,
    settings: Settings | None = None,
) -> RecommendationResult:
    """Score one property against the viewer's context."""
    settings = settings or get_settings()
    cfg = settings.recommendation
    p = coerce_property(record)

    signals = _detect_signals(p, intent=intent, favorite_ids=favorite_ids, cfg=cfg)
    raw = _raw_score(signals, cfg)
    match_percent = int(clamp(round_half_up(raw), cfg.match_floor, cfg.match_ceiling))
    cue_label, cue_tone = pick_cue(match_percent, cfg)

    return RecommendationResult(
        property=p,
        match_percent=match_percent,
        reason_tag=pick_reason(signals),
        explanation=build_explanation(signals, p),
        cue_label=cue_label,
        cue_tone=cue_tone,
        preview=preview,
    )


def _coerce_options(options: RankOptions | Mapping[str, Any] | None) -> RankOptions:
    if isinstance(options, RankOptions):
        return options
    if not isinstance(options, Mapping):
        return RankOptions()
    try:
        return RankOptions.model_validate(dict(options))
    except ValidationError as exc:
        logger.debug("Ignoring malformed rank options: %s", exc)
        return RankOptions()


def rank(
    properties: Iterable[Any] | None,
    options: RankOptions | Mapping[str, Any] | None = None,
    *,
    intent_store: SearchIntentStore | None = None,
    settings: Settings | None = None,
) -> list[RecommendationResult]:
    """Rank properties for a viewer, best match first, at most `limit` results.

    A missing `search_intent` falls back to the store's last saved search (if a
    store is given); absent user/favorites are treated as neutral.
    """
    settings = settings or get_settings()
    opts = _coerce_options(options)

    intent = opts.search_intent
    if intent is None:
        intent = intent_store.load() if intent_store is not None else SearchIntent()

    limit = opts.limit or settings.recommendation.default_limit
    preview = opts.mode == "preview" or not opts.user

    scored = [
        score_recommendation(
            record,
            intent=intent,
            favorite_ids=opts.favorite_ids,
            preview=preview,
            settings=settings,
        )
        for record in (properties or ())
        if record is not None
    ]
    # list.sort is stable: equal match percents keep input order.
    scored.sort(key=lambda r: r.match_percent, reverse=True)
    logger.debug(
        "Ranked %d properties (limit=%d, preview=%s, has_search=%s)",
        len(scored),
        limit,
        preview,
        not intent.is_empty,
    )
    return scored[:limit]
