"""Link registry: creation, lookup, listing and deletion of links."""

import logging
import uuid
from typing import List, Optional

from .clock import Clock, system_clock
from .common.validators import is_valid_url, is_valid_short_code
from .database.base import LinkStoreBase
from .database.models import Link
from .errors import (
    Conflict,
    DuplicateCodeError,
    ExhaustedRetries,
    InvalidInput,
    NotFound,
    translate_store_errors,
)
from .shortcode import ShortCodeGenerator


MAX_GENERATION_ATTEMPTS = 10

VISIT_HISTORY_LIMIT = 100


class LinkRegistry:
    """Owns the lifecycle of links.

    Uniqueness is checked before insert to give a fast answer, but the store's
    unique constraint on ``code`` decides races between concurrent creators.
    """

    def __init__(
        self,
        store: LinkStoreBase,
        generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        clock: Clock = system_clock,
        max_attempts: int = MAX_GENERATION_ATTEMPTS,
        visit_history_limit: int = VISIT_HISTORY_LIMIT,
    ):
        """Initialize link registry.

        Args:
            store: Link store
            generator: Optional short code generator
            logger: Optional logger
            clock: Source of the current time
            max_attempts: Random codes tried before giving up
            visit_history_limit: Recent visits returned by ``get``
        """
        self.store = store
        self.generator = generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock
        self.max_attempts = max_attempts
        self.visit_history_limit = visit_history_limit

    async def create(self, url: str, custom_code: Optional[str] = None) -> Link:
        """Create a new link.

        Args:
            url: Absolute http(s) target URL
            custom_code: Optional code chosen by the caller

        Returns:
            The stored link

        Raises:
            InvalidInput: If the URL or custom code is malformed
            Conflict: If the custom code is already taken
            ExhaustedRetries: If no free random code was found
            StoreUnavailable: If the store failed
        """
        is_valid, error = is_valid_url(url)
        if not is_valid:
            raise InvalidInput(error)

        with translate_store_errors(self.logger, "create link"):
            if custom_code is None or custom_code == "":
                link = await self._create_with_generated_code(url)
            else:
                link = await self._create_with_custom_code(url, custom_code)

        self.logger.info(f"Created link: {link.code} -> {link.url}")
        return link

    async def _create_with_custom_code(self, url: str, custom_code: str) -> Link:
        is_valid, error = is_valid_short_code(custom_code)
        if not is_valid:
            raise InvalidInput(error)

        if await self.store.code_exists(custom_code):
            raise Conflict("Code already exists")

        try:
            return await self.store.insert_link(self._new_link(custom_code, url))
        except DuplicateCodeError:
            self.logger.warning(f"Lost insert race for custom code: {custom_code}")
            raise Conflict("Code already exists") from None

    async def _create_with_generated_code(self, url: str) -> Link:
        for attempt in range(1, self.max_attempts + 1):
            code = self.generator.generate()

            if await self.store.code_exists(code):
                self.logger.debug(f"Generated code collided (attempt {attempt}): {code}")
                continue

            try:
                return await self.store.insert_link(self._new_link(code, url))
            except DuplicateCodeError:
                self.logger.debug(f"Generated code taken at insert (attempt {attempt}): {code}")

        self.logger.warning(f"No free code after {self.max_attempts} attempts")
        raise ExhaustedRetries("Failed to generate unique code. Please try again.")

    def _new_link(self, code: str, url: str) -> Link:
        return Link(
            id=str(uuid.uuid4()),
            code=code,
            url=url,
            clicks=0,
            last_clicked_at=None,
            created_at=self.clock(),
        )

    async def get(self, code: str) -> Link:
        """Get a link with its most recent visits, newest first.

        Raises:
            NotFound: If no link has this code
        """
        if not ShortCodeGenerator.validate_format(code):
            raise NotFound("Link not found")

        with translate_store_errors(self.logger, "fetch link"):
            link = await self.store.get_link_by_code(code)
            if link is None:
                raise NotFound("Link not found")
            link.visits = await self.store.list_visits(link.id, self.visit_history_limit)

        return link

    async def list(self) -> List[Link]:
        """List all links newest-created first, without visits."""
        with translate_store_errors(self.logger, "fetch links"):
            return await self.store.list_links()

    async def delete(self, code: str) -> None:
        """Delete a link and its visits.

        Raises:
            NotFound: If no link has this code
        """
        if not ShortCodeGenerator.validate_format(code):
            raise NotFound("Link not found")

        with translate_store_errors(self.logger, "delete link"):
            deleted = await self.store.delete_link(code)

        if not deleted:
            raise NotFound("Link not found")

        self.logger.info(f"Deleted link: {code}")
