from stayscore.scoring.context import build_context


PROPERTIES = [
    {"id": "a", "price": {"monthly": 10000}, "views": 0, "bookingsCount": 2},
    {"id": "b", "price": {"monthly": 30000}, "views": 100, "bookingsCount": 0},
    {"id": "c", "price": {"monthly": 50000}, "views": 0, "bookingsCount": 9},
    {"id": "d", "price": {"monthly": 0}, "views": 20},
    {"id": "e", "views": "NaN"},
]


def test_context_tracks_price_bounds_over_usable_prices():
    ctx = build_context(PROPERTIES)
    assert ctx.min_price == 10000
    assert ctx.max_price == 50000
    assert ctx.average_price == 30000
    assert ctx.reference_price == 30000
    assert ctx.has_price_range


def test_context_tracks_demand_ceilings_and_average_views():
    ctx = build_context(PROPERTIES)
    assert ctx.max_views == 100
    assert ctx.max_bookings_count == 9
    # "e" has no numeric view count and stays out of the average.
    assert ctx.average_views == 120 / 4


def test_context_is_order_independent():
    assert build_context(PROPERTIES) == build_context(list(reversed(PROPERTIES)))


def test_empty_or_priceless_collection_keeps_safe_floors():
    for items in ([], None, [None], [{"id": "x"}]):
        ctx = build_context(items)
        assert ctx.min_price is None
        assert ctx.max_price is None
        assert ctx.reference_price is None
        assert ctx.max_views == 1
        assert ctx.max_bookings_count == 1
        assert not ctx.has_price_range


def test_single_price_has_no_range():
    ctx = build_context([{"price": 12000}])
    assert ctx.min_price == ctx.max_price == 12000
    assert not ctx.has_price_range
    assert ctx.reference_price == 12000


def test_average_views_skips_records_without_a_view_count():
    ctx = build_context([{"views": 90}, {"views": None}, {"id": "no-views"}, {"views": "lots"}])
    assert ctx.average_views == 90
    assert build_context([{"id": "x"}]).average_views is None
