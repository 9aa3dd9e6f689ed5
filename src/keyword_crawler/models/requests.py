"""API request schemas."""
from datetime import date
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CrawlRequest(BaseModel):
    """Request schema for a keyword crawl over one or more domains."""

    model_config = ConfigDict(frozen=True)

    urls: List[str] = Field(
        ...,
        description="Seed URLs, one per domain. A comma-separated string is also accepted."
    )
    keywords: List[str] = Field(..., description="Search terms, matched case-insensitively")
    max_depth: int = Field(default=2, ge=1, description="BFS depth ceiling from each seed")
    max_time_seconds: int = Field(default=30, ge=1, description="Wall-clock budget per domain")
    max_pages: int = Field(default=10, ge=1, description="Counted-page budget per domain")
    follow_pagination: bool = Field(
        default=True,
        description="Follow 'next page' links at the same depth"
    )
    date_from: Optional[date] = Field(default=None, description="Inclusive lower date bound")
    date_to: Optional[date] = Field(default=None, description="Inclusive upper date bound")

    @field_validator("urls", mode="before")
    @classmethod
    def split_url_string(cls, value: Union[str, List[str]]) -> List[str]:
        """Accept the legacy ``"a.com, b.com"`` form as well as a list."""
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple)):
            return value
        cleaned = []
        for item in value:
            if not isinstance(item, str):
                cleaned.append(item)
                continue
            item = item.replace("`", "").strip()
            if item:
                cleaned.append(item)
        return cleaned

    @field_validator("keywords", mode="before")
    @classmethod
    def strip_keywords(cls, value):
        """Trim keywords and drop case-insensitive duplicates, keeping input order."""
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            return value
        seen = set()
        keywords = []
        for keyword in value:
            if not isinstance(keyword, str):
                keywords.append(keyword)
                continue
            keyword = keyword.strip()
            if keyword and keyword.lower() not in seen:
                seen.add(keyword.lower())
                keywords.append(keyword)
        return keywords
