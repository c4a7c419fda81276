import logging

import pytest

from pricecheck.core.errors import InvalidQueryError, UpstreamError
from pricecheck.schemas.offers import Offer


def _prices(response):
    return [o.price for o in response.results]


class TestSearchService:
    """Test suite for the aggregation flow."""

    @pytest.mark.asyncio
    async def test_primary_results_filtered_and_sorted(self, make_service, shopping_results):
        service, primary, fallback = make_service(primary_results=shopping_results)

        response = await service.search("laptop")

        assert response.source == "serpapi-or-fallback"
        assert _prices(response) == [52490.0, 84999.0]
        assert all(o.link and o.price is not None for o in response.results)
        primary.assert_awaited_once()
        assert primary.await_args.args[:2] == ("laptop", "test-key")
        fallback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_equal_prices_keep_input_order(self, make_service):
        results = [
            {"title": "first", "price": "$10", "link": "a"},
            {"title": "cheap", "price": "$5", "link": "b"},
            {"title": "second", "price": "$10", "link": "c"},
        ]
        service, _, _ = make_service(primary_results=results)

        response = await service.search("thing")

        assert [o.title for o in response.results] == ["cheap", "first", "second"]

    @pytest.mark.asyncio
    async def test_unusable_primary_results_trigger_fallback(self, make_service, catalog_offers):
        results = [{"title": "no price", "link": "a"}, {"title": "no link", "price": "$3"}]
        service, _, fallback = make_service(primary_results=results, fallback_offers=catalog_offers)

        response = await service.search("backpack")

        fallback.assert_awaited_once()
        assert _prices(response) == [55.99, 109.95]

    @pytest.mark.asyncio
    async def test_no_credential_skips_primary(self, make_service, catalog_offers):
        service, primary, fallback = make_service(fallback_offers=catalog_offers, SERPAPI_API_KEY=None)

        response = await service.search("backpack")

        assert response.source == "fallback-only"
        primary.assert_not_awaited()
        fallback.assert_awaited_once()
        assert fallback.await_args.args[0] == "backpack"

    @pytest.mark.asyncio
    async def test_primary_failure_is_logged_and_recovered(self, make_service, catalog_offers, caplog):
        caplog.set_level(logging.WARNING, logger="pricecheck.services.search")
        service, primary, fallback = make_service(fallback_offers=catalog_offers)
        primary.side_effect = UpstreamError("SerpApi", "request failed", status_code=500)

        response = await service.search("backpack")

        assert response.source == "serpapi-or-fallback"
        assert len(response.results) == 2
        fallback.assert_awaited_once()
        assert "SerpApi HTTP 500" in caplog.text

    @pytest.mark.asyncio
    async def test_fallback_failure_propagates(self, make_service):
        service, primary, fallback = make_service(SERPAPI_API_KEY=None)
        fallback.side_effect = UpstreamError("FakeStore", "request failed: down")

        with pytest.raises(UpstreamError):
            await service.search("backpack")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   ", None])
    async def test_blank_query_rejected_without_upstream_calls(self, make_service, query):
        service, primary, fallback = make_service()

        with pytest.raises(InvalidQueryError):
            await service.search(query)

        primary.assert_not_awaited()
        fallback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_repeat_within_ttl_served_from_cache(self, make_service, shopping_results, clock):
        service, primary, fallback = make_service(primary_results=shopping_results)

        first = await service.search("Laptop")
        clock.advance(299)
        second = await service.search("  laptop ")

        assert second.source == "cache"
        assert second.results == first.results
        assert primary.await_count == 1

    @pytest.mark.asyncio
    async def test_repeat_after_ttl_refetches(self, make_service, shopping_results, clock):
        service, primary, _ = make_service(primary_results=shopping_results)

        await service.search("laptop")
        clock.advance(300)
        response = await service.search("laptop")

        assert response.source == "serpapi-or-fallback"
        assert primary.await_count == 2

    @pytest.mark.asyncio
    async def test_empty_result_is_cached(self, make_service, cache):
        service, primary, fallback = make_service()

        first = await service.search("unobtainium")
        second = await service.search("unobtainium")

        assert first.results == []
        assert second.source == "cache"
        assert fallback.await_count == 1
        assert cache.get("unobtainium").data == []

    @pytest.mark.asyncio
    async def test_fallback_offers_without_price_sort_last(self, make_service):
        offers = [
            Offer(title="unknown", price=None, link="a"),
            Offer(title="cheap", price=1.0, link="b"),
        ]
        service, _, _ = make_service(fallback_offers=offers, SERPAPI_API_KEY=None)

        response = await service.search("x")

        assert [o.title for o in response.results] == ["cheap", "unknown"]
