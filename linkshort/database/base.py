"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from typing import Optional, List
from datetime import datetime

from .models import Link, Visit


class LinkStoreBase(ABC):
    """Abstract base class for link and visit persistence.

    The store is the only shared mutable resource. It owns uniqueness of
    ``code`` and the atomicity of click accounting; callers never lock.
    Implementations raise ``StoreError`` for backend failures and
    ``DuplicateCodeError`` when an insert violates the unique code constraint.
    """

    def __init__(self, db_config: str):
        """Initialize store.

        Args:
            db_config: Store connection string
        """
        self.db_config = db_config

    @abstractmethod
    async def connect(self) -> None:
        """Open connections. Called once at process start."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release connections. Called once at process shutdown."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def create_schema(self) -> None:
        """Create tables and indexes if they don't exist."""
        pass

    @abstractmethod
    async def get_link_by_code(self, code: str) -> Optional[Link]:
        """Point lookup by unique code.

        Args:
            code: The short code to lookup

        Returns:
            The link (without visits) or None if not found
        """
        pass

    @abstractmethod
    async def get_link_by_id(self, link_id: str) -> Optional[Link]:
        """Point lookup by id.

        Args:
            link_id: The link identifier

        Returns:
            The link (without visits) or None if not found
        """
        pass

    @abstractmethod
    async def code_exists(self, code: str) -> bool:
        """Check if a code is already taken.

        Args:
            code: The short code to check

        Returns:
            True if exists, False otherwise
        """
        pass

    @abstractmethod
    async def insert_link(self, link: Link) -> Link:
        """Persist a new link.

        Args:
            link: Fully populated link to insert

        Returns:
            The stored link

        Raises:
            DuplicateCodeError: If another link already uses ``link.code``
        """
        pass

    @abstractmethod
    async def record_click(self, link_id: str, visit: Visit) -> bool:
        """Atomically count a click and log its visit.

        Increments ``clicks`` by one, sets ``last_clicked_at`` to
        ``visit.created_at`` and inserts ``visit``, all or nothing.

        Args:
            link_id: The clicked link
            visit: Visit row to insert

        Returns:
            True if recorded, False if the link no longer exists
        """
        pass

    @abstractmethod
    async def list_links(self) -> List[Link]:
        """List all links, newest-created first, without visits."""
        pass

    @abstractmethod
    async def list_visits(self, link_id: str, limit: int) -> List[Visit]:
        """List the most recent visits of a link, newest first.

        Args:
            link_id: The owning link
            limit: Maximum number of visits to return
        """
        pass

    @abstractmethod
    async def delete_link(self, code: str) -> bool:
        """Delete a link and, by cascade, its visits.

        Args:
            code: The short code to delete

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    async def count_links(self) -> int:
        """Count all links."""
        pass

    @abstractmethod
    async def sum_clicks(self) -> int:
        """Sum ``clicks`` over all links, 0 when there are none."""
        pass

    @abstractmethod
    async def count_visits_since(self, since: datetime) -> int:
        """Count visits with ``created_at >= since``."""
        pass

    @abstractmethod
    async def get_top_link(self) -> Optional[Link]:
        """Return one of the links with the highest click count, or None if empty."""
        pass
