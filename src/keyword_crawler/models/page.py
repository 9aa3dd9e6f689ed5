"""Per-page crawl outcomes."""
from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass
class RawPage:
    """HTML body returned by the fetcher."""

    url: str
    final_url: str
    html: str
    last_modified_header: Optional[str] = None


@dataclass
class FetchedPage:
    """A page that was fetched and processed."""

    url: str
    cleaned_text: str
    title: Optional[str] = None
    links: List[str] = field(default_factory=list)
    pagination_links: List[str] = field(default_factory=list)
    published_date: Optional[str] = None
    last_modified: Optional[str] = None


@dataclass
class FailedPage:
    """A page that could not be fetched or parsed."""

    url: str
    reason: str


PageOutcome = Union[FetchedPage, FailedPage]
