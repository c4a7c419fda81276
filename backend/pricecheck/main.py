"""
Price Check API - FastAPI Main Entry

LOCAL:
    pip install -e .
    export SERPAPI_KEY=...        # optional, catalog-only without it
    python -m uvicorn pricecheck.main:app --reload --host 0.0.0.0 --port 8000

    or simply:
        python -m pricecheck.main

TEST:
    curl -i http://127.0.0.1:8000/health
    curl -i "http://127.0.0.1:8000/search?query=backpack"
    curl -i -X POST http://127.0.0.1:8000/search \
        -H "Content-Type: application/json" -d '{"query": "backpack"}'

PRODUCTION:
    Start Command:
        python -m uvicorn pricecheck.main:app --host 0.0.0.0 --port $PORT
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pricecheck.core.cache import InMemoryResultCache
from pricecheck.core.config import Settings, settings as default_settings
from pricecheck.services.search import SearchService

# Routers
from pricecheck.api.routes_meta import router as meta_router
from pricecheck.api.routes_search import router as search_router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    search_service: Optional[SearchService] = None,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Price Check API",
        version=settings.APP_VERSION,
        description="Looks up a product and returns matching offers, cheapest first",
    )

    # One cache per process, shared by every request
    app.state.settings = settings
    app.state.search_service = search_service or SearchService(
        settings=settings,
        cache=InMemoryResultCache(max_entries=settings.CACHE_MAX_ENTRIES),
    )

    if not settings.primary_enabled:
        logger.info("No SerpApi key configured; serving catalog results only")

    # CORS: the browser page may be served from anywhere
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.get("/")
    def root():
        return {
            "name": "Price Check API",
            "status": "ok",
            "docs": "/docs",
            "health": "/health",
            "search": "/search?query=...",
        }

    # Mount routers; /api/search keeps the serverless-style path working
    app.include_router(meta_router)
    app.include_router(search_router)
    app.include_router(search_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("pricecheck.main:app", host="0.0.0.0", port=8000, log_level="info")
