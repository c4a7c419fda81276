"""Pytest configuration and fixtures for tests."""
from unittest.mock import AsyncMock

import pytest

from pricecheck.core.cache import InMemoryResultCache
from pricecheck.core.config import Settings
from pricecheck.schemas.offers import Offer
from pricecheck.services.search import SearchService

CREDENTIAL_ENV_VARS = ("SERPAPI_KEY", "SERP_API_KEY", "SERPAPIKEY", "SERP_KEY", "SERPAPI_API_KEY")


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def no_real_credentials(monkeypatch):
    """Never let a developer's SerpApi key leak into a test run."""
    for name in CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_settings():
    def _make(**overrides) -> Settings:
        values = {"SERPAPI_API_KEY": "test-key"}
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache():
    return InMemoryResultCache()


@pytest.fixture
def catalog_offers():
    return [
        Offer(title="Fjallraven Backpack", price=109.95, currency="USD",
              link="https://fakestoreapi.com/products/1", merchant="FakeStore"),
        Offer(title="Mens Cotton Backpack Jacket", price=55.99, currency="USD",
              link="https://fakestoreapi.com/products/3", merchant="FakeStore"),
    ]


@pytest.fixture
def shopping_results():
    return [
        {"title": "Laptop Pro 14", "extracted_price": 84999, "price": "₹84,999",
         "link": "https://shop.example/pro14", "source": "Example Store"},
        {"title": "Laptop Air", "price": "₹52,490.00",
         "product_link": "https://shop.example/air", "source": "Other Store"},
        {"title": "Laptop without price", "link": "https://shop.example/none"},
        {"title": "Laptop without link", "price": "₹1,000"},
    ]


@pytest.fixture
def make_service(make_settings, cache, clock):
    """Builds a SearchService with mocked sources; returns (service, primary, fallback)."""

    def _make(primary_results=None, fallback_offers=None, settings=None, **setting_overrides):
        settings = settings or make_settings(**setting_overrides)
        primary = AsyncMock(return_value=primary_results if primary_results is not None else [])
        fallback = AsyncMock(return_value=fallback_offers if fallback_offers is not None else [])
        service = SearchService(
            settings=settings,
            cache=cache,
            primary=primary,
            fallback=fallback,
            clock=clock,
        )
        return service, primary, fallback

    return _make
