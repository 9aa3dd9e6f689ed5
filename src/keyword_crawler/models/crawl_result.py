"""Data models for crawl results."""
from typing import Optional, Tuple
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class CrawlState(str, Enum):
    """Lifecycle of a single domain crawl."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    BUDGETED = "budgeted"
    FAILED = "failed"


class KeywordMatch(BaseModel):
    """Occurrences of one keyword on one page."""

    model_config = ConfigDict(frozen=True)

    keyword: str = Field(..., description="Keyword as given in the request")
    context: str = Field(..., description="Excerpt around the first occurrence")
    cleaned_text: str = Field(..., description="Full cleaned text of the page")
    count: int = Field(..., ge=1, description="Occurrences on the page")
    relevance_score: float = Field(..., ge=0.0, le=1.0, description="Normalized relevance")
    source_url: str = Field(..., description="Page the match was found on")


class CrawlMetadata(BaseModel):
    """Metadata for the representative page of a domain crawl."""

    model_config = ConfigDict(frozen=True)

    crawl_timestamp: datetime = Field(..., description="When the domain crawl started")
    total_processing_time_ms: int = Field(default=0, description="Domain crawl duration")
    content_summary: Optional[str] = Field(default=None, description="Leading excerpt of the page")
    last_modified: Optional[str] = Field(default=None, description="Page modification date as published")
    published_date: Optional[str] = Field(default=None, description="Page publication date as published")


class DomainResult(BaseModel):
    """Result of crawling one seed's domain."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Seed URL")
    title: Optional[str] = Field(default=None, description="Seed page title")
    matches: Tuple[KeywordMatch, ...] = Field(default=(), description="Matches in discovery order")
    pages_crawled: int = Field(default=0, ge=0, description="Counted pages")
    has_more_pages: bool = Field(default=False, description="Budget hit with work remaining")
    metadata: Optional[CrawlMetadata] = None
    error: Optional[str] = Field(default=None, description="Set when the seed was unusable")
    status: CrawlState = Field(default=CrawlState.COMPLETED, description="Terminal crawl state")


class CrawlResult(BaseModel):
    """Aggregated result of one crawl request."""

    model_config = ConfigDict(frozen=True)

    results: Tuple[DomainResult, ...] = Field(default=(), description="One entry per seed, input order")
    total_pages_crawled: int = Field(default=0, ge=0)
    total_processing_time_ms: int = Field(default=0, ge=0)
    crawl_timestamp: datetime = Field(..., description="When the request started")
