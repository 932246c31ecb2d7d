"""In-memory implementation of the link store.

Keeps links and visits in dictionaries. Used by the test suite and for local
development (``DATABASE_URL=memory://``). Each operation yields to the event
loop once and then touches state without awaiting again, so operations are
atomic with respect to each other within a single event loop. State is lost
when the process exits.
"""

import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional

from .base import LinkStoreBase
from .models import Link, Visit
from ..errors import StoreError, DuplicateCodeError


class InMemoryLinkStore(LinkStoreBase):
    """Dictionary-backed link store."""

    def __init__(self, db_config: str = "memory://", logger: Optional[logging.Logger] = None):
        super().__init__(db_config)
        self.logger = logger or logging.getLogger(__name__)
        self._links: Dict[str, Link] = {}
        self._ids_by_code: Dict[str, str] = {}
        self._visits: Dict[str, List[Visit]] = {}
        self._connected = False

    async def _checkpoint(self) -> None:
        """Suspension point shared by every operation."""
        await asyncio.sleep(0)
        if not self._connected:
            raise StoreError("In-memory store is not connected")

    async def connect(self) -> None:
        self._connected = True
        self.logger.info("In-memory store ready")

    async def close(self) -> None:
        self._connected = False

    async def health_check(self) -> bool:
        return self._connected

    async def create_schema(self) -> None:
        await self._checkpoint()

    async def get_link_by_code(self, code: str) -> Optional[Link]:
        await self._checkpoint()
        link_id = self._ids_by_code.get(code)
        return replace(self._links[link_id]) if link_id else None

    async def get_link_by_id(self, link_id: str) -> Optional[Link]:
        await self._checkpoint()
        link = self._links.get(link_id)
        return replace(link) if link else None

    async def code_exists(self, code: str) -> bool:
        await self._checkpoint()
        return code in self._ids_by_code

    async def insert_link(self, link: Link) -> Link:
        await self._checkpoint()
        if link.code in self._ids_by_code:
            raise DuplicateCodeError(f"Code '{link.code}' already exists")

        stored = replace(link, visits=None)
        self._links[stored.id] = stored
        self._ids_by_code[stored.code] = stored.id
        self._visits[stored.id] = []
        return replace(stored)

    async def record_click(self, link_id: str, visit: Visit) -> bool:
        await self._checkpoint()
        link = self._links.get(link_id)
        if link is None:
            return False

        link.clicks += 1
        link.last_clicked_at = visit.created_at
        self._visits[link_id].append(replace(visit))
        return True

    async def list_links(self) -> List[Link]:
        await self._checkpoint()
        links = sorted(self._links.values(), key=lambda link: link.created_at, reverse=True)
        return [replace(link) for link in links]

    async def list_visits(self, link_id: str, limit: int) -> List[Visit]:
        await self._checkpoint()
        visits = sorted(
            self._visits.get(link_id, []),
            key=lambda visit: visit.created_at,
            reverse=True,
        )
        return [replace(visit) for visit in visits[:limit]]

    async def delete_link(self, code: str) -> bool:
        await self._checkpoint()
        link_id = self._ids_by_code.pop(code, None)
        if link_id is None:
            return False

        del self._links[link_id]
        self._visits.pop(link_id, None)
        return True

    async def count_links(self) -> int:
        await self._checkpoint()
        return len(self._links)

    async def sum_clicks(self) -> int:
        await self._checkpoint()
        return sum(link.clicks for link in self._links.values())

    async def count_visits_since(self, since: datetime) -> int:
        await self._checkpoint()
        return sum(
            1
            for visits in self._visits.values()
            for visit in visits
            if visit.created_at >= since
        )

    async def get_top_link(self) -> Optional[Link]:
        await self._checkpoint()
        if not self._links:
            return None
        return replace(max(self._links.values(), key=lambda link: link.clicks))
