"""Redirect and liveness routes served at the site root."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from linkshort.errors import NotFound, StoreUnavailable
from linkshort.resolver import RequestMetadata
from ..api.routes import API_VERSION
from ..api.schemas import LivenessResponse

router = APIRouter()


@router.get("/healthz", response_model=LivenessResponse, include_in_schema=False)
async def liveness_web():
    """Liveness probe (simple version for load balancers)."""
    return LivenessResponse(version=API_VERSION)


@router.get("/{code:path}", include_in_schema=False)
async def redirect_to_url(request: Request, code: str):
    """Redirect to the target URL of a short code.

    Malformed paths and unknown codes get the same 404.
    """
    service = request.app.state.service

    metadata = RequestMetadata(
        user_agent=request.headers.get("user-agent"),
        referer=request.headers.get("referer"),
    )

    try:
        target_url = await service.resolve(code, metadata)
    except NotFound:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "Not found"},
        )
    except StoreUnavailable as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(e)},
        )

    # Perform 302 redirect (temporary redirect for tracking)
    return RedirectResponse(url=target_url, status_code=status.HTTP_302_FOUND)
