"""Cross-link aggregate statistics."""

import logging
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from .clock import Clock, start_of_day, system_clock
from .database.base import LinkStoreBase
from .errors import translate_store_errors


@dataclass
class TopLink:
    code: str
    url: str
    clicks: int

    def to_dict(self) -> dict:
        return {"code": self.code, "url": self.url, "clicks": self.clicks}


@dataclass
class Statistics:
    total_links: int
    total_clicks: int
    clicks_today: int
    top_link: Optional[TopLink] = None

    def to_dict(self) -> dict:
        return {
            "total_links": self.total_links,
            "total_clicks": self.total_clicks,
            "clicks_today": self.clicks_today,
            "top_link": self.top_link.to_dict() if self.top_link else None,
        }


class StatisticsAggregator:
    """Computes aggregate figures on demand from the store.

    "Today" starts at local midnight in ``tz``, or in the server's local
    timezone when ``tz`` is None.
    """

    def __init__(
        self,
        store: LinkStoreBase,
        logger: Optional[logging.Logger] = None,
        clock: Clock = system_clock,
        tz: Optional[tzinfo] = None,
    ):
        self.store = store
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock
        self.tz = tz

    async def aggregate(self) -> Statistics:
        """Compute totals, today's clicks and the most clicked link.

        Raises:
            StoreUnavailable: If the store failed
        """
        since = start_of_day(self.clock(), self.tz)

        with translate_store_errors(self.logger, "fetch statistics"):
            total_links = await self.store.count_links()
            total_clicks = await self.store.sum_clicks()
            clicks_today = await self.store.count_visits_since(since)
            top = await self.store.get_top_link()

        top_link = None
        if top is not None and top.clicks > 0:
            top_link = TopLink(code=top.code, url=top.url, clicks=top.clicks)

        return Statistics(
            total_links=total_links,
            total_clicks=total_clicks or 0,
            clicks_today=clicks_today,
            top_link=top_link,
        )
