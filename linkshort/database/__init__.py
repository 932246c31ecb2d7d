"""Persistence layer for links and visits."""

from .base import LinkStoreBase
from .factory import create_store
from .memory import InMemoryLinkStore
from .models import Link, Visit
from .postgres import PostgresLinkStore

__all__ = [
    "LinkStoreBase",
    "InMemoryLinkStore",
    "PostgresLinkStore",
    "Link",
    "Visit",
    "create_store",
]
