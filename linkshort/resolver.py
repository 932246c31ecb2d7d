"""Redirect resolution with click accounting."""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from .clock import Clock, system_clock
from .database.base import LinkStoreBase
from .database.models import Visit
from .errors import NotFound, StoreError, translate_store_errors
from .shortcode import ShortCodeGenerator


# First path segments owned by other routes; never treated as link codes.
# Matched as a whole segment, so codes such as "apiKey99" stay reachable.
RESERVED_PREFIXES = frozenset({"api", "code"})


@dataclass(frozen=True)
class RequestMetadata:
    """Client-supplied headers recorded with each visit."""

    user_agent: Optional[str] = None
    referer: Optional[str] = None


def is_link_path(code: str) -> bool:
    """Return False for paths that can never name a link.

    Rejects the empty path, anything file-like (containing a dot) and paths
    under a reserved route prefix.
    """
    if not code or "." in code:
        return False
    return code.split("/", 1)[0].lower() not in RESERVED_PREFIXES


class RedirectResolver:
    """Resolves codes to target URLs and records each click.

    The counter increment and the visit insert are applied in one store
    transaction. When that transaction fails the redirect still proceeds;
    the click is then lost as a whole, never half-recorded.
    """

    def __init__(
        self,
        store: LinkStoreBase,
        logger: Optional[logging.Logger] = None,
        clock: Clock = system_clock,
    ):
        self.store = store
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock

    async def resolve(self, code: str, metadata: Optional[RequestMetadata] = None) -> str:
        """Resolve a code and record the click.

        Args:
            code: Path-derived code
            metadata: Optional user agent and referer of the request

        Returns:
            Target URL for a temporary redirect

        Raises:
            NotFound: If the path is not a link code or no link has it
            StoreUnavailable: If the lookup itself failed
        """
        if not is_link_path(code) or not ShortCodeGenerator.validate_format(code):
            raise NotFound("Not found")

        with translate_store_errors(self.logger, "resolve link"):
            link = await self.store.get_link_by_code(code)

        if link is None:
            self.logger.warning(f"Short code not found: {code}")
            raise NotFound("Not found")

        metadata = metadata or RequestMetadata()
        visit = Visit(
            id=str(uuid.uuid4()),
            link_id=link.id,
            user_agent=metadata.user_agent or None,
            referer=metadata.referer or None,
            created_at=self.clock(),
        )

        try:
            recorded = await self.store.record_click(link.id, visit)
        except StoreError as e:
            self.logger.error(f"Click accounting failed for {code}, redirecting anyway: {e}")
        else:
            if recorded:
                self.logger.debug(f"Redirect: {code} -> {link.url}")
            else:
                self.logger.warning(f"Link {code} vanished before its click was recorded")

        return link.url
