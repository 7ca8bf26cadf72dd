import pytest

from storefront.cache.page_cache import PageCache
from storefront.products.models import RevalidationEvent
from storefront.services.revalidation_service import (
    RevalidationDispatcher,
    WebhookNotConfigured,
    WebhookUnauthorized,
    plan_revalidation,
)


def _event(type_, record=None, old_record=None):
    return RevalidationEvent(type=type_, record=record, old_record=old_record)


def test_listing_always_revalidated():
    plan = plan_revalidation(_event("DELETE"))
    assert plan.paths == ["/products"]
    assert plan.tags == ["products"]


def test_slug_rename_revalidates_both_detail_pages():
    plan = plan_revalidation(_event("UPDATE", {"slug": "new"}, {"slug": "old"}))
    assert "/products/new" in plan.paths
    assert "/products/old" in plan.paths


def test_old_slug_ignored_for_non_updates():
    plan = plan_revalidation(_event("INSERT", {"slug": "new"}, {"slug": "old"}))
    assert "/products/old" not in plan.paths


def test_unfeatured_product_still_revalidates_home():
    plan = plan_revalidation(_event("UPDATE", {"slug": "a", "is_featured": False}, {"slug": "a", "is_featured": True}))
    assert "/" in plan.paths


def test_featured_deal_and_featured_add_home_once():
    plan = plan_revalidation(_event("UPDATE", {"slug": "a", "is_featured": True, "is_featured_deal": True}))
    assert plan.paths == ["/products", "/products/a", "/"]


def test_authorize():
    dispatcher = RevalidationDispatcher("s3cret", PageCache())
    dispatcher.authorize("Bearer s3cret")

    with pytest.raises(WebhookUnauthorized):
        dispatcher.authorize("Bearer nope")
    with pytest.raises(WebhookUnauthorized):
        dispatcher.authorize(None)
    with pytest.raises(WebhookUnauthorized):
        dispatcher.authorize("s3cret")


def test_missing_secret_is_a_configuration_error():
    dispatcher = RevalidationDispatcher(None, PageCache())
    with pytest.raises(WebhookNotConfigured):
        dispatcher.authorize("Bearer anything")


def test_dispatch_invalidates_cache():
    cache = PageCache()
    cache.set("/products", {}, tags=["products"])
    cache.set("/products/old", {}, tags=["products"])
    cache.set("/", {}, tags=["home"])
    cache.set("/about", {})

    result = RevalidationDispatcher("s3cret", cache).dispatch(
        _event("UPDATE", {"slug": "new", "is_featured": True}, {"slug": "old"})
    )

    assert result["revalidated"] is True
    assert result["timestamp"]
    assert result["paths"] == ["/products", "/products/new", "/products/old", "/"]
    assert "/products" not in cache
    assert "/products/old" not in cache
    assert "/" not in cache
    assert "/about" in cache
