from fastapi import APIRouter, Request

router = APIRouter(tags=["meta"])


@router.get("/health")
def health():
    return {"ok": True}


@router.get("/version")
def version(request: Request):
    settings = request.app.state.settings
    return {
        "version": settings.APP_VERSION,
        "build": settings.BUILD_ID,
        "primary_source": "serpapi" if settings.primary_enabled else None,
    }
