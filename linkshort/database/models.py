"""Data models for the link shortener."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class Visit:
    """One recorded redirect event."""

    id: str
    link_id: str
    created_at: datetime
    user_agent: Optional[str] = None
    referer: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "link_id": self.link_id,
            "user_agent": self.user_agent,
            "referer": self.referer,
            "created_at": _isoformat(self.created_at),
        }


@dataclass
class Link:
    """A short code mapped to a target URL, with its click analytics.

    ``visits`` is only populated by detail lookups; summaries leave it None.
    """

    id: str
    code: str
    url: str
    created_at: datetime
    clicks: int = 0
    last_clicked_at: Optional[datetime] = None
    visits: Optional[List[Visit]] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {
            "id": self.id,
            "code": self.code,
            "url": self.url,
            "clicks": self.clicks,
            "last_clicked_at": _isoformat(self.last_clicked_at),
            "created_at": _isoformat(self.created_at),
        }
        if self.visits is not None:
            data["visits"] = [visit.to_dict() for visit in self.visits]
        return data
