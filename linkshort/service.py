"""Service facade over the link shortener core."""

import logging
from datetime import tzinfo
from typing import Dict, List, Optional

from .clock import Clock, system_clock
from .database.base import LinkStoreBase
from .database.models import Link
from .registry import LinkRegistry, MAX_GENERATION_ATTEMPTS, VISIT_HISTORY_LIMIT
from .resolver import RedirectResolver, RequestMetadata
from .shortcode import ShortCodeGenerator
from .statistics import Statistics, StatisticsAggregator


class LinkShortenerService:
    """Single entry point used by the HTTP layer and the CLI."""

    def __init__(
        self,
        store: LinkStoreBase,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        clock: Clock = system_clock,
        stats_timezone: Optional[tzinfo] = None,
        max_generation_attempts: int = MAX_GENERATION_ATTEMPTS,
        visit_history_limit: int = VISIT_HISTORY_LIMIT,
    ):
        """Initialize link shortener service.

        Args:
            store: Link store, already connected
            short_code_generator: Optional short code generator
            logger: Optional logger
            clock: Source of the current time
            stats_timezone: Timezone for the "today" boundary, server-local if None
            max_generation_attempts: Random codes tried per create
            visit_history_limit: Recent visits returned with a link
        """
        self.store = store
        self.logger = logger or logging.getLogger(__name__)
        self.registry = LinkRegistry(
            store=store,
            generator=short_code_generator,
            logger=self.logger,
            clock=clock,
            max_attempts=max_generation_attempts,
            visit_history_limit=visit_history_limit,
        )
        self.resolver = RedirectResolver(store=store, logger=self.logger, clock=clock)
        self.aggregator = StatisticsAggregator(
            store=store,
            logger=self.logger,
            clock=clock,
            tz=stats_timezone,
        )

    async def create_link(self, url: str, custom_code: Optional[str] = None) -> Link:
        return await self.registry.create(url, custom_code)

    async def get_link(self, code: str) -> Link:
        return await self.registry.get(code)

    async def list_links(self) -> List[Link]:
        return await self.registry.list()

    async def delete_link(self, code: str) -> None:
        await self.registry.delete(code)

    async def resolve(self, code: str, metadata: Optional[RequestMetadata] = None) -> str:
        return await self.resolver.resolve(code, metadata)

    async def get_statistics(self) -> Statistics:
        return await self.aggregator.aggregate()

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.store.health_check()
        return {
            "database": db_healthy,
            "overall": db_healthy,
        }

    async def close(self) -> None:
        """Close store connections."""
        await self.store.close()
