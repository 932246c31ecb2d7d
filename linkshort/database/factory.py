"""Store selection from a connection URL."""

import logging
from typing import Optional
from urllib.parse import urlparse

from .base import LinkStoreBase
from .memory import InMemoryLinkStore
from .postgres import PostgresLinkStore


POSTGRES_SCHEMES = ("postgres", "postgresql")
MEMORY_SCHEMES = ("memory",)


def create_store(
    database_url: str,
    pool_min_size: int = 1,
    pool_max_size: int = 10,
    command_timeout_seconds: int = 30,
    logger: Optional[logging.Logger] = None,
) -> LinkStoreBase:
    """Build the store matching the URL scheme.

    Args:
        database_url: ``postgresql://...`` or ``memory://``
        pool_min_size: Minimum pool size (PostgreSQL only)
        pool_max_size: Maximum pool size (PostgreSQL only)
        command_timeout_seconds: Statement timeout (PostgreSQL only)
        logger: Optional logger instance

    Returns:
        An unconnected store; call ``connect()`` before use

    Raises:
        ValueError: If the scheme is not supported
    """
    scheme = urlparse(database_url).scheme.lower()

    if scheme in POSTGRES_SCHEMES:
        return PostgresLinkStore(
            db_config=database_url,
            pool_min_size=pool_min_size,
            pool_max_size=pool_max_size,
            command_timeout_seconds=command_timeout_seconds,
            logger=logger,
        )
    if scheme in MEMORY_SCHEMES:
        return InMemoryLinkStore(db_config=database_url, logger=logger)

    raise ValueError(f"Unsupported database URL scheme: '{scheme}'")
