"""Wall-clock helpers.

All timestamps produced by the service are timezone-aware. The day boundary
used for "clicks today" is local midnight in the configured timezone, or in
the server's own local timezone when none is configured.
"""

from datetime import datetime, tzinfo
from typing import Callable, Optional
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Current time as an aware datetime in server-local time."""
    return datetime.now().astimezone()


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Look up an IANA timezone by name. None means server-local."""
    if not name:
        return None
    return ZoneInfo(name)


def start_of_day(now: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Return midnight of the calendar day containing ``now``.

    Args:
        now: Reference instant (naive values are taken as server-local)
        tz: Timezone defining the calendar day, server-local if None

    Returns:
        Aware datetime at 00:00 of that day
    """
    if tz is not None:
        return now.astimezone(tz).replace(hour=0, minute=0, second=0, microsecond=0)

    # astimezone() pins today's current offset; rebuild midnight under the
    # local DST rules instead.
    naive = now.astimezone().replace(tzinfo=None, hour=0, minute=0, second=0, microsecond=0)
    return naive.astimezone()
