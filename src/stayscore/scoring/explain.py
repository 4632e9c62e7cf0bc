"""
Small explainability formatting helpers.

Used by the CLI to print compact summaries of scoring results.
"""

from __future__ import annotations

from stayscore.domain.models import QualityBreakdown, RecommendationResult


def one_line_summary(breakdown: QualityBreakdown) -> str:
    """Render a compact single-line summary for a quality breakdown."""
    parts = [f"total={breakdown.total_score}"]
    for comp in breakdown.components:
        parts.append(f"{comp.name}={comp.score:.3f} (w={comp.weight:.2f})")
    return " | ".join(parts)


def recommendation_line(result: RecommendationResult) -> str:
    """Render one recommendation as `match% cue | reason`."""
    tag = " [preview]" if result.preview else ""
    return f"{result.match_percent}% {result.cue_label}{tag} | {result.reason_tag}"
