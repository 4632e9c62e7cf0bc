"""Availability feature: a fixed lookup from status to a 0..1 score."""

from __future__ import annotations

from stayscore.config.settings import Settings
from stayscore.core.numbers import clamp01


def score_availability(availability: str | None, *, settings: Settings) -> float:
    cfg = settings.quality
    status = (availability or "").strip().lower()
    return clamp01(cfg.availability_scores.get(status, cfg.unknown_availability_score))
