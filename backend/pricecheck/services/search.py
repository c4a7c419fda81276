"""
Search aggregation - validate, cache, primary source, fallback source.
"""

import logging
import time
from typing import Awaitable, Callable, List, Optional

from pricecheck.core.cache import CacheEntry, InMemoryResultCache, cache_key
from pricecheck.core.catalog import fetch_catalog_offers
from pricecheck.core.config import Settings
from pricecheck.core.errors import InvalidQueryError
from pricecheck.core.normalize import normalize
from pricecheck.core.serpapi import fetch_shopping_results
from pricecheck.schemas.offers import (
    Offer,
    SearchResponse,
    SOURCE_CACHE,
    SOURCE_FALLBACK_ONLY,
    SOURCE_PRIMARY,
)

logger = logging.getLogger(__name__)

PrimaryFetcher = Callable[..., Awaitable[list]]
FallbackFetcher = Callable[..., Awaitable[List[Offer]]]


def sort_by_price(offers: List[Offer]) -> List[Offer]:
    """Cheapest first; stable for equal prices; offers without a price go last."""
    return sorted(
        offers,
        key=lambda o: (o.price is None, o.price if o.price is not None else 0.0),
    )


def usable_offers(raw_results: list) -> List[Offer]:
    """Normalize primary results and keep only those with a price and a link."""
    offers = [normalize(r) for r in raw_results]
    return [o for o in offers if o.price is not None and o.link]


class SearchService:
    """
    Runs one search request to completion: primary and fallback calls are
    made one after the other, never concurrently.
    """

    def __init__(
        self,
        settings: Settings,
        cache: Optional[InMemoryResultCache] = None,
        primary: PrimaryFetcher = fetch_shopping_results,
        fallback: FallbackFetcher = fetch_catalog_offers,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self.cache = cache if cache is not None else InMemoryResultCache(settings.CACHE_MAX_ENTRIES)
        self.primary = primary
        self.fallback = fallback
        self.clock = clock

    def _fresh_entry(self, key: str) -> Optional[CacheEntry]:
        entry = self.cache.get(key)
        if entry is None:
            return None
        if entry.age(self.clock()) >= self.settings.CACHE_TTL_SECONDS:
            logger.debug(f"Cache entry for {key!r} is stale")
            return None
        return entry

    async def _primary_offers(self, query: str) -> List[Offer]:
        api_key = self.settings.SERPAPI_API_KEY
        if not api_key:
            return []
        try:
            raw_results = await self.primary(query, api_key, settings=self.settings)
        except Exception as e:
            # Rate limits and outages are expected here; the catalog covers them.
            logger.warning(f"SerpApi error for {query!r}: {e}")
            return []

        offers = sort_by_price(usable_offers(raw_results or []))
        logger.info(f"SerpApi produced {len(offers)} usable offers from {len(raw_results or [])} results")
        return offers

    async def search(self, query: Optional[str]) -> SearchResponse:
        """
        Raises InvalidQueryError for a blank query. Errors from the fallback
        source are not caught.
        """
        query = (query or "").strip()
        if not query:
            raise InvalidQueryError()

        key = cache_key(query)
        cached = self._fresh_entry(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key!r}")
            return SearchResponse(source=SOURCE_CACHE, results=cached.data)

        offers = await self._primary_offers(query)

        if not offers:
            logger.info(f"Falling back to catalog for {query!r}")
            offers = sort_by_price(await self.fallback(query, settings=self.settings))

        # Empty lists are cached too, so dead queries don't hit upstream again.
        self.cache.set(key, CacheEntry(timestamp=self.clock(), data=offers))

        source = SOURCE_PRIMARY if self.settings.primary_enabled else SOURCE_FALLBACK_ONLY
        return SearchResponse(source=source, results=offers)
