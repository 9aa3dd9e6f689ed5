"""API route handlers."""

from . import crawl, health

__all__ = [
    "crawl",
    "health",
]
