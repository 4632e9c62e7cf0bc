"""
StayScore CLI entrypoint.

This CLI is intended for quick local demos and debugging against a catalog file.
It delegates all scoring to `stayscore.recommender` and `stayscore.scoring`.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from stayscore.catalog.loader import load_properties
from stayscore.config.settings import get_settings
from stayscore.core.logging import configure_logging
from stayscore.domain.models import RankOptions, SearchIntent
from stayscore.recommender.intent import build_intent_store
from stayscore.recommender.listing import rank_by_quality
from stayscore.recommender.rank import rank
from stayscore.scoring.context import build_context
from stayscore.scoring.explain import one_line_summary, recommendation_line
from stayscore.scoring.quality import explain_score


def _cmd_score(args: argparse.Namespace) -> int:
    """Handle the `score` subcommand (quality-ranked listing)."""
    settings = get_settings()
    properties = load_properties(args.catalog or settings.catalog.path)
    result = rank_by_quality(properties, page=args.page, limit=args.limit, settings=settings)

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    context = build_context(properties)
    print(f"Page {result.page}/{result.total_pages} ({result.total} properties)")
    for i, item in enumerate(result.properties, start=1):
        p = item.property
        breakdown = explain_score(p, context, settings=settings)
        print(f"{i:>2}. {p.title or p.id} ({p.address.city or '-'})  [{item.ai_label}]")
        print(f"    {one_line_summary(breakdown)}")
    return 0


def _cmd_recommend(args: argparse.Namespace) -> int:
    """Handle the `recommend` subcommand (personalized ranking)."""
    settings = get_settings()
    properties = load_properties(args.catalog or settings.catalog.path)

    search_intent = None
    if args.city is not None or args.query is not None:
        search_intent = SearchIntent(city=args.city, query=args.query)

    options = RankOptions(
        user=args.user,
        favorite_ids=args.favorite or [],
        search_intent=search_intent,
        limit=args.limit,
        mode=args.mode,
    )
    results = rank(properties, options, intent_store=build_intent_store(settings), settings=settings)

    if args.json:
        print(json.dumps([r.model_dump(mode="json") for r in results], ensure_ascii=False, indent=2))
        return 0

    for i, r in enumerate(results, start=1):
        p = r.property
        print(f"{i:>2}. {p.title or p.id} ({p.address.city or '-'})  {recommendation_line(r)}")
        print(f"    {r.explanation}")
    return 0


def _cmd_search(args: argparse.Namespace) -> int:
    """Handle the `search` subcommand (persist the last search intent)."""
    store = build_intent_store(get_settings())
    intent = store.save(args.city, args.query)
    print(json.dumps(intent.model_dump(), ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the StayScore CLI."""
    parser = argparse.ArgumentParser(prog="stayscore")
    sub = parser.add_subparsers(dest="command", required=True)

    sc = sub.add_parser("score", help="Rank a catalog by intrinsic quality score.")
    sc.add_argument("--catalog", type=str, default=None, help="Catalog JSON path (default from config).")
    sc.add_argument("--page", type=int, default=1)
    sc.add_argument("--limit", type=int, default=None, help="Page size (default from config).")
    sc.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    sc.set_defaults(func=_cmd_score)

    rec = sub.add_parser("recommend", help="Personalized recommendations for a viewer.")
    rec.add_argument("--catalog", type=str, default=None, help="Catalog JSON path (default from config).")
    rec.add_argument("--city", type=str, default=None, help="Search city (default: last saved search)")
    rec.add_argument("--query", type=str, default=None, help="Search text (default: last saved search)")
    rec.add_argument("--favorite", action="append", default=[], help="Repeatable favorite property id.")
    rec.add_argument("--user", type=str, default=None, help="Viewer id; omit for preview results.")
    rec.add_argument("--mode", choices=["auto", "preview"], default="auto")
    rec.add_argument("--limit", type=int, default=None)
    rec.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    rec.set_defaults(func=_cmd_recommend)

    se = sub.add_parser("search", help="Persist the last search intent used by `recommend`.")
    se.add_argument("--city", type=str, default="")
    se.add_argument("--query", type=str, default="")
    se.set_defaults(func=_cmd_search)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m stayscore.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
