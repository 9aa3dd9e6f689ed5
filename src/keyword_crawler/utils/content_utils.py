"""Content cleaning and processing utilities."""
from typing import Optional
from datetime import date, datetime
from email.utils import parsedate_to_datetime
import re


_WHITESPACE = re.compile(r"\s+")

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%d.%m.%Y", "%B %d, %Y", "%b %d, %Y")

BOILERPLATE_TAGS = [
    "script", "style", "noscript", "template", "iframe", "svg",
    "nav", "header", "footer", "aside", "form",
]


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def summarize(text: str, limit: int = 200) -> Optional[str]:
    """
    Leading excerpt of ``text`` cut at a word boundary.

    Args:
        text: Cleaned text
        limit: Maximum excerpt length before the ellipsis

    Returns:
        Excerpt, or None for empty text
    """
    if not text:
        return None
    if len(text) <= limit:
        return text
    cut = text[:limit]
    space = cut.rfind(" ")
    if space > limit // 2:
        cut = cut[:space]
    return cut.rstrip() + "..."


def parse_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a date as it appears in page metadata.

    Handles ISO 8601 timestamps (with ``Z`` or offsets) and a few common
    calendar formats. Returns None when nothing matches.
    """
    if not value:
        return None
    value = value.strip()
    if not value:
        return None

    iso = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        return datetime.fromisoformat(iso).date()
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    # "2024-03-05T10:00:00.123456789Z" and similar oddities: keep the date part
    match = re.match(r"(\d{4})-(\d{2})-(\d{2})", value)
    if match:
        try:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        except ValueError:
            return None
    return None


def http_date_to_iso(value: Optional[str]) -> Optional[str]:
    """Convert an RFC 7231 ``Last-Modified`` header into an ISO 8601 string."""
    if not value:
        return None
    try:
        return parsedate_to_datetime(value).isoformat()
    except (TypeError, ValueError, IndexError):
        return None
