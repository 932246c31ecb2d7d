"""Pydantic schemas for API requests and responses.

Responses are serialized with camelCase field names, matching what the
dashboard front end reads.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, List, Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Base model with camelCase aliases that still accepts snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CreateLinkRequest(BaseModel):
    """Request to create a short link.

    Fields are typed loosely and validated by the service, so malformed
    input of any JSON type is reported as 400 rather than 422.
    """

    url: Optional[Any] = Field(None, description="The URL to shorten")
    code: Optional[Any] = Field(None, description="Optional custom code, 6-8 characters [A-Za-z0-9]")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://example.com/very/long/path/to/resource",
                },
                {
                    "url": "https://github.com/user/repo",
                    "code": "myRepo01"
                }
            ]
        }
    }


class VisitResponse(CamelModel):
    """One recorded visit."""

    id: str
    link_id: str
    user_agent: Optional[str] = None
    referer: Optional[str] = None
    created_at: datetime


class LinkResponse(CamelModel):
    """Link summary with analytics."""

    id: str
    code: str
    url: str
    clicks: int
    last_clicked_at: Optional[datetime] = None
    created_at: datetime


class LinkDetailResponse(LinkResponse):
    """Link with its most recent visits, newest first."""

    visits: List[VisitResponse] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    """Deletion confirmation."""

    success: bool = True


class TopLinkResponse(CamelModel):
    """Most clicked link."""

    code: str
    url: str
    clicks: int


class StatisticsResponse(CamelModel):
    """Aggregate statistics."""

    total_links: int
    total_clicks: int
    clicks_today: int
    top_link: Optional[TopLinkResponse] = None


class LivenessResponse(BaseModel):
    """Liveness probe response."""

    ok: bool = True
    version: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str = Field(..., description="Error message")
