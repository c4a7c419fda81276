"""
Provider record -> Offer normalization.

Shopping results are not schema-stable: the same value shows up under
different keys depending on engine, region and result type. Each Offer field
is therefore resolved from an ordered tuple of accessors; the first one that
yields a non-empty value wins. The tuples are the precedence, so changing the
order changes behavior.
"""

import re
from typing import Any, Callable, Dict, Optional, Tuple

from pricecheck.core.prices import parse_price
from pricecheck.schemas.offers import Offer

Accessor = Callable[[Dict[str, Any]], Any]

_PRICE_CHARS = re.compile(r"[\d.,\s]")


def _key(name: str) -> Accessor:
    def get(r: Dict[str, Any]) -> Any:
        return r.get(name)

    get.__name__ = f"key_{name}"
    return get


def _first_inline_image(r: Dict[str, Any]) -> Any:
    """
    inline_images is either a list of URLs or a list of objects like
    {"thumbnail": "...", "link": "...", "original": "..."}.
    """
    images = r.get("inline_images")
    if not isinstance(images, list) or not images:
        return None
    first = images[0]
    if isinstance(first, dict):
        for k in ("thumbnail", "link", "original"):
            if first.get(k):
                return first[k]
        return None
    return first


def _first_offer(field: str) -> Accessor:
    def get(r: Dict[str, Any]) -> Any:
        offers = r.get("offers")
        if isinstance(offers, list) and offers and isinstance(offers[0], dict):
            return offers[0].get(field)
        return None

    get.__name__ = f"first_offer_{field}"
    return get


TITLE_ACCESSORS: Tuple[Accessor, ...] = (
    _key("title"),
    _key("product_title"),
    _key("name"),
)

IMAGE_ACCESSORS: Tuple[Accessor, ...] = (
    _key("thumbnail"),
    _key("thumbnail_link"),
    _key("image"),
    _first_inline_image,
)

LINK_ACCESSORS: Tuple[Accessor, ...] = (
    _key("link"),
    _key("product_link"),
    _key("source"),
    _key("result_link"),
)

PRICE_ACCESSORS: Tuple[Accessor, ...] = (
    _key("extracted_price"),
    _key("price"),
    _first_offer("price"),
    _first_offer("extracted_price"),
)

MERCHANT_ACCESSORS: Tuple[Accessor, ...] = (
    _key("merchant"),
    _key("source"),
    _key("store"),
)


def first_present(record: Dict[str, Any], accessors: Tuple[Accessor, ...]) -> Any:
    """Returns the first truthy value produced by `accessors`, else None."""
    for get in accessors:
        v = get(record)
        if v:
            return v
    return None


def _text(v: Any) -> Optional[str]:
    # Numbers are kept as text; nested structures are not a usable value.
    if isinstance(v, str):
        return v
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return None


def derive_currency(record: Dict[str, Any], price_raw: Any) -> Optional[str]:
    explicit = _text(record.get("currency"))
    if explicit:
        return explicit
    if not price_raw:
        return None
    # "$12" -> "$", "₹1,299" -> "₹", 12.5 -> None
    symbol = _PRICE_CHARS.sub("", str(price_raw)).strip()
    return symbol or None


def normalize(raw: Any) -> Offer:
    """
    Maps one shopping result into an Offer. Never raises; missing fields
    become None (title becomes "").
    """
    record = raw if isinstance(raw, dict) else {}

    price_raw = first_present(record, PRICE_ACCESSORS)

    return Offer(
        title=_text(first_present(record, TITLE_ACCESSORS)) or "",
        price=parse_price(price_raw),
        currency=derive_currency(record, price_raw),
        image=_text(first_present(record, IMAGE_ACCESSORS)),
        link=_text(first_present(record, LINK_ACCESSORS)),
        merchant=_text(first_present(record, MERCHANT_ACCESSORS)),
        raw=raw,
    )
