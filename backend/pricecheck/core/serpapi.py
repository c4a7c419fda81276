import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from pricecheck.core.config import Settings, settings as default_settings
from pricecheck.core.errors import UpstreamError

logger = logging.getLogger(__name__)

SOURCE_NAME = "SerpApi"

# Envelope keys that may carry the shopping list, in order of preference.
RESULT_LIST_KEYS = ("shopping_results", "inline_shopping_results")


def _redact_key(s: str) -> str:
    """
    Redact 'api_key=...' in URLs or text so we never leak API keys in logs/errors.
    """
    if not s:
        return s
    return re.sub(r"(api_key=)([^&\s]+)", r"\1REDACTED", s)


def extract_result_list(data: Any) -> List[Dict[str, Any]]:
    if not isinstance(data, dict):
        return []
    for k in RESULT_LIST_KEYS:
        v = data.get(k)
        if isinstance(v, list):
            return v
    return []


async def fetch_shopping_results(
    query: str,
    api_key: str,
    settings: Optional[Settings] = None,
) -> List[Dict[str, Any]]:
    """
    Calls SerpAPI Google Shopping and returns the raw shopping result records.

    Raises UpstreamError on transport failures, non-2xx statuses and error
    payloads. Region, locale and result count are pinned by settings.
    """
    settings = settings or default_settings

    params: Dict[str, Any] = {
        "q": query,
        "engine": settings.SERPAPI_ENGINE,
        "hl": settings.SERPAPI_HL,
        "gl": settings.SERPAPI_GL,
        "num": settings.SERPAPI_NUM,
        "api_key": api_key,
    }

    try:
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
            r = await client.get(settings.SERPAPI_BASE, params=params)
    except httpx.HTTPError as e:
        raise UpstreamError(SOURCE_NAME, f"request failed: {_redact_key(str(e))}") from e

    if not r.is_success:
        raise UpstreamError(
            SOURCE_NAME,
            "request failed",
            status_code=r.status_code,
            body=_redact_key(r.text)[:2000] or None,
        )

    try:
        data = r.json()
    except ValueError as e:
        raise UpstreamError(SOURCE_NAME, "returned a non-JSON body") from e

    # If the engine returns an error payload, surface it clearly
    if isinstance(data, dict) and data.get("error"):
        raise UpstreamError(SOURCE_NAME, f"error: {data.get('error')}")

    results = extract_result_list(data)
    logger.debug(f"SerpApi returned {len(results)} shopping results for {query!r}")
    return results
