"""API routes implementation."""

from typing import List

from fastapi import APIRouter, Request, HTTPException, status
from datetime import datetime, timezone

from linkshort.errors import (
    Conflict,
    ExhaustedRetries,
    InvalidInput,
    NotFound,
    StoreUnavailable,
)
from .schemas import (
    CreateLinkRequest,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    LinkDetailResponse,
    LinkResponse,
    LivenessResponse,
    StatisticsResponse,
)

API_VERSION = "1.0"

router = APIRouter()


def _server_error(e: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e),
    )


@router.get(
    "/links",
    response_model=List[LinkResponse],
    responses={500: {"model": ErrorResponse, "description": "Internal server error"}},
    summary="List links",
    description="List all links, newest first, with click analytics.",
)
async def list_links(request: Request):
    """List all links."""
    service = request.app.state.service

    try:
        links = await service.list_links()
    except StoreUnavailable as e:
        raise _server_error(e)

    return [LinkResponse.model_validate(link) for link in links]


@router.post(
    "/links",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL or code"},
        409: {"model": ErrorResponse, "description": "Code already exists"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short link",
    description="Create a short link. Optionally provide a custom code.",
)
async def create_link(request: Request, body: CreateLinkRequest):
    """Create a short link."""
    service = request.app.state.service

    try:
        link = await service.create_link(url=body.url, custom_code=body.code)
    except InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Conflict as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except (ExhaustedRetries, StoreUnavailable) as e:
        raise _server_error(e)

    return LinkResponse.model_validate(link)


@router.get(
    "/links/{code}",
    response_model=LinkDetailResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Link not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Get link",
    description="Get a link with its most recent visits.",
)
async def get_link(request: Request, code: str):
    """Get a link with its visits."""
    service = request.app.state.service

    try:
        link = await service.get_link(code)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StoreUnavailable as e:
        raise _server_error(e)

    return LinkDetailResponse.model_validate(link)


@router.delete(
    "/links/{code}",
    response_model=DeleteResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Link not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Delete link",
    description="Delete a link and all of its visits.",
)
async def delete_link(request: Request, code: str):
    """Delete a link."""
    service = request.app.state.service

    try:
        await service.delete_link(code)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StoreUnavailable as e:
        raise _server_error(e)

    return DeleteResponse()


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    responses={500: {"model": ErrorResponse, "description": "Internal server error"}},
    summary="Get statistics",
    description="Get totals, clicks today and the most clicked link.",
)
async def get_statistics(request: Request):
    """Get service statistics."""
    service = request.app.state.service

    try:
        stats = await service.get_statistics()
    except StoreUnavailable as e:
        raise _server_error(e)

    return StatisticsResponse.model_validate(stats)


@router.get(
    "/healthz",
    response_model=LivenessResponse,
    summary="Liveness check",
)
async def liveness():
    """Liveness probe. Does not touch the store."""
    return LivenessResponse(version=API_VERSION)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service and its store are healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
