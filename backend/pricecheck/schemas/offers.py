from pydantic import BaseModel
from typing import Any, Optional, List

SOURCE_CACHE = "cache"
SOURCE_PRIMARY = "serpapi-or-fallback"   # credential configured
SOURCE_FALLBACK_ONLY = "fallback-only"   # no credential, catalog only


class Offer(BaseModel):
    title: str = ""
    price: Optional[float] = None        # parsed numeric value used for sorting
    currency: Optional[str] = None       # e.g. "USD" or "₹"
    image: Optional[str] = None
    link: Optional[str] = None
    merchant: Optional[str] = None
    raw: Optional[Any] = None            # untouched provider record


class SearchResponse(BaseModel):
    source: str
    results: List[Offer]


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
