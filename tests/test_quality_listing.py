from stayscore.config.settings import Settings
from stayscore.recommender.listing import rank_by_quality
from stayscore.recommender.rank import rank


LISTINGS = [
    {"id": "cheap", "rating": 4, "price": {"monthly": 10000}, "views": 0, "availability": "available"},
    {"id": "busy", "rating": 4, "price": {"monthly": 30000}, "views": 100, "availability": "available"},
    {"id": "pricey", "rating": 4, "price": {"monthly": 50000}, "views": 0, "availability": "booked"},
]


def test_listing_sorts_by_score_and_labels_items():
    page = rank_by_quality(LISTINGS, settings=Settings())

    scores = [item.score for item in page.properties]
    assert scores == sorted(scores, reverse=True)
    labels = {item.property.id: item.ai_label for item in page.properties}
    assert labels == {"cheap": "Best Value", "busy": "High Demand", "pricey": "Recommended"}
    assert page.average_price == 30000
    assert page.max_price == 50000
    assert page.views_threshold == 33


def test_listing_uses_dataset_range_for_price():
    page = rank_by_quality(LISTINGS, settings=Settings())
    by_id = {item.property.id: item.score for item in page.properties}
    # rating 0.8, price 1.0 (cheapest in range), demand 0, available
    assert by_id["cheap"] == 68
    # rating 0.8, price 0.0 (priciest in range), demand 0, booked
    assert by_id["pricey"] == 28


def test_listing_pagination_clamps_page():
    items = [{"id": f"p{i}", "rating": i % 5, "price": 1000 * (i + 1)} for i in range(6)]
    settings = Settings()

    first = rank_by_quality(items, page=1, limit=4, settings=settings)
    assert first.total == 6
    assert first.total_pages == 2
    assert len(first.properties) == 4

    beyond = rank_by_quality(items, page=9, limit=4, settings=settings)
    assert beyond.page == 2
    assert len(beyond.properties) == 2

    assert rank_by_quality(items, page=0, limit=4, settings=settings).page == 1
    assert len(rank_by_quality(items, settings=settings).properties) == 6


def test_empty_listing_has_one_empty_page():
    page = rank_by_quality([], settings=Settings())
    assert page.total == 0
    assert page.total_pages == 1
    assert page.page == 1
    assert page.properties == []


def test_equal_scores_show_newest_first():
    older = {"id": "old", "rating": 3, "createdAt": "2025-01-01T00:00:00Z"}
    newer = {"id": "new", "rating": 3, "createdAt": "2025-06-01T00:00:00Z"}
    undated = {"id": "undated", "rating": 3}
    page = rank_by_quality([older, undated, newer], settings=Settings())
    assert [item.property.id for item in page.properties] == ["new", "old", "undated"]


def test_listing_labels_feed_the_recommendation_ranker():
    settings = Settings()
    page = rank_by_quality(LISTINGS, settings=settings)
    labelled = [item.property.model_copy(update={"ai_label": item.ai_label}) for item in page.properties]

    results = rank(labelled, {"user": "u1"}, settings=settings)
    reasons = {r.property.id: r.reason_tag for r in results}
    assert reasons["busy"] == "Popular with similar users"
    assert reasons["cheap"] == "Great value for your budget"


def test_high_demand_threshold_ignores_listings_without_views():
    listings = [{"id": "hot", "views": 60}, {"id": "warm", "views": 40}, {"id": "new"}, {"id": "draft"}]
    page = rank_by_quality(listings, settings=Settings())
    labels = {item.property.id: item.ai_label for item in page.properties}
    assert page.views_threshold == 50
    assert labels["hot"] == "High Demand"
    assert labels["warm"] == "Recommended"
