import logging
from typing import Any, Optional

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from pricecheck.core.errors import InvalidQueryError
from pricecheck.schemas.offers import ErrorResponse, SearchResponse
from pricecheck.services.search import SearchService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["search"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _as_query_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


async def _query_from_body(request: Request) -> Optional[Any]:
    """
    Reads {"query": ...} from a JSON body. An empty or non-object body has no
    query; a malformed one raises and ends up as a 500.
    """
    raw = await request.body()
    if not raw.strip():
        return None
    body = await request.json()
    if isinstance(body, dict):
        return body.get("query")
    return None


def _service(request: Request) -> SearchService:
    return request.app.state.search_service


async def _run_search(request: Request, from_body: bool) -> Response:
    try:
        query = _as_query_text(request.query_params.get("query"))
        if not query and from_body:
            query = _as_query_text(await _query_from_body(request))

        result = await _service(request).search(query)
        return JSONResponse(status_code=200, content=result.model_dump(mode="json"))

    except InvalidQueryError as e:
        return JSONResponse(status_code=400, content={"error": e.message})

    except Exception as e:
        # Always answer with JSON, never a raw traceback
        logger.exception(f"Search handler error: {e}")
        return JSONResponse(status_code=500, content={"error": "Server error", "details": str(e)})


@router.get("/search", response_model=SearchResponse, responses=ERROR_RESPONSES)
async def search_get(request: Request):
    """
    Returns offers for `?query=` sorted by lowest price first.
    `source` tells whether the answer came from the cache.
    """
    return await _run_search(request, from_body=False)


@router.post("/search", response_model=SearchResponse, responses=ERROR_RESPONSES)
async def search_post(request: Request):
    """Same as GET; the query comes from `?query=` or a JSON body {"query": "..."}."""
    return await _run_search(request, from_body=True)


@router.options("/search")
async def search_options():
    return Response(status_code=200)
