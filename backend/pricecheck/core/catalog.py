"""
Fallback product source: the FakeStore catalog.

The catalog has no search API, so the whole listing is fetched and matched
locally. Its schema is small and stable, so items are mapped straight to
Offers instead of going through the shopping-result normalizer.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from pricecheck.core.config import Settings, settings as default_settings
from pricecheck.core.errors import UpstreamError
from pricecheck.core.prices import parse_price
from pricecheck.schemas.offers import Offer

logger = logging.getLogger(__name__)

SOURCE_NAME = "FakeStore"


def catalog_item_to_offer(item: Dict[str, Any], settings: Settings) -> Offer:
    base = settings.FALLBACK_CATALOG_URL.rstrip("/")
    return Offer(
        title=str(item.get("title") or ""),
        price=parse_price(item.get("price")),
        currency=settings.FALLBACK_CURRENCY,
        image=item.get("image") if isinstance(item.get("image"), str) else None,
        link=f"{base}/{item.get('id')}",
        merchant=settings.FALLBACK_MERCHANT,
        raw=item,
    )


def matches_query(item: Any, query: str) -> bool:
    if not isinstance(item, dict):
        return False
    title = item.get("title")
    if not isinstance(title, str) or not title:
        return False
    return query.lower() in title.lower()


async def fetch_catalog_offers(query: str, settings: Optional[Settings] = None) -> List[Offer]:
    """
    Returns catalog Offers whose title contains `query` (case-insensitive),
    in catalog order.

    Failures are not handled here: UpstreamError propagates to the caller.
    """
    settings = settings or default_settings

    try:
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
            r = await client.get(settings.FALLBACK_CATALOG_URL)
    except httpx.HTTPError as e:
        raise UpstreamError(SOURCE_NAME, f"request failed: {e}") from e

    if not r.is_success:
        raise UpstreamError(SOURCE_NAME, "request failed", status_code=r.status_code, body=r.text[:2000] or None)

    try:
        items = r.json()
    except ValueError as e:
        raise UpstreamError(SOURCE_NAME, "returned a non-JSON body") from e

    if not isinstance(items, list):
        raise UpstreamError(SOURCE_NAME, f"expected a product list, got {type(items).__name__}")

    offers = [catalog_item_to_offer(p, settings) for p in items if matches_query(p, query)]
    logger.info(f"FakeStore matched {len(offers)} of {len(items)} products for {query!r}")
    return offers
