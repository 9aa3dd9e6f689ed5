"""Exception hierarchy for the crawl engine."""
from typing import Any, Dict, Optional


class CrawlerException(Exception):
    """Base exception for crawler-related errors."""

    def __init__(self, message: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class FetchError(CrawlerException):
    """A single page could not be fetched.

    ``reason`` is ``network_error``, ``timeout``, ``unsupported_content_type``,
    ``too_many_redirects`` or ``http_status:<code>``.
    """

    def __init__(self, reason: str, url: str):
        self.reason = reason
        self.url = url
        super().__init__(
            f"Fetch failed for {url}: {reason}",
            status_code=502,
            details={"url": url, "reason": reason}
        )

    @property
    def transient(self) -> bool:
        return self.reason in ("network_error", "timeout")


class ParseError(CrawlerException):
    """Fetched HTML could not be parsed."""

    reason = "parse_error"

    def __init__(self, url: str, detail: Optional[str] = None):
        self.url = url
        message = f"Could not parse HTML from {url}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, status_code=502, details={"url": url})


class DomainError(CrawlerException):
    """The seed page of a domain is unusable; only that domain's crawl ends."""

    def __init__(self, url: str, cause: CrawlerException):
        self.url = url
        self.cause = cause
        reason = getattr(cause, "reason", "unknown")
        super().__init__(
            f"Seed {url} unavailable: {reason}",
            status_code=502,
            details={"url": url, "reason": reason}
        )


class EngineError(CrawlerException):
    """Malformed request rejected before any crawling starts."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(message, status_code=400, details=details)
