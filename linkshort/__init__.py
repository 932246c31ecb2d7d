"""Core business logic for the link shortener."""

from .shortcode import ShortCodeGenerator
from .registry import LinkRegistry
from .resolver import RedirectResolver, RequestMetadata
from .statistics import StatisticsAggregator, Statistics, TopLink
from .service import LinkShortenerService

__all__ = [
    "ShortCodeGenerator",
    "LinkRegistry",
    "RedirectResolver",
    "RequestMetadata",
    "StatisticsAggregator",
    "Statistics",
    "TopLink",
    "LinkShortenerService",
]
