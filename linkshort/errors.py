"""Error taxonomy for the link shortener core."""

import logging
from contextlib import contextmanager
from typing import Iterator


class LinkShortenerError(Exception):
    """Base class for errors surfaced by core operations."""


class InvalidInput(LinkShortenerError, ValueError):
    """Malformed URL or short code. Always caused by the caller."""


class Conflict(LinkShortenerError):
    """The requested short code is already taken."""


class NotFound(LinkShortenerError):
    """No link exists for the given code."""


class ExhaustedRetries(LinkShortenerError):
    """Random generation could not find a free code. Safe to retry."""


class StoreUnavailable(LinkShortenerError):
    """The backing store failed. Details are logged, never surfaced."""


class StoreError(Exception):
    """Raised by store implementations for any backend failure."""


class DuplicateCodeError(StoreError):
    """Raised by store implementations when the unique constraint on code rejects an insert."""


@contextmanager
def translate_store_errors(logger: logging.Logger, operation: str) -> Iterator[None]:
    """Convert store failures into StoreUnavailable at an operation boundary.

    DuplicateCodeError is left alone so callers can map it to Conflict.

    Args:
        logger: Logger receiving the internal error detail
        operation: Short description used in log and error messages
    """
    try:
        yield
    except DuplicateCodeError:
        raise
    except StoreError as e:
        logger.error(f"Store failure during {operation}: {e}")
        raise StoreUnavailable(f"Failed to {operation}") from None
