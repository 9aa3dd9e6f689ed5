"""
HTTP fetcher issuing one GET per page and classifying the outcome.
"""
from typing import Dict, Optional, Union
import asyncio

import httpx

from ..core.config import settings
from ..core.exceptions import FetchError
from ..core.logging import logger
from ..models.page import FailedPage, RawPage


HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


class PageFetcher:
    """
    Thin wrapper around a shared ``httpx.AsyncClient``.

    One attempt per call: failures come back as ``FailedPage`` with a
    reason string and are never retried here.
    """

    def __init__(
        self,
        max_redirects: Optional[int] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        max_connections: int = 32
    ):
        self.max_redirects = max_redirects if max_redirects is not None else settings.CRAWLER_MAX_REDIRECTS
        self.user_agent = user_agent or settings.CRAWLER_USER_AGENT or \
            "Mozilla/5.0 (compatible; KeywordCrawler/1.0)"
        self.transport = transport
        self.max_connections = max_connections
        self._client: Optional[httpx.AsyncClient] = None
        self._users = 0

    async def __aenter__(self):
        """Open the shared client, or join the one already open."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                max_redirects=self.max_redirects,
                headers=self._get_headers(),
                limits=httpx.Limits(max_connections=self.max_connections),
                transport=self.transport
            )
        self._users += 1
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Close the client once the last user has left."""
        self._users -= 1
        if self._users <= 0 and self._client:
            self._users = 0
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str, timeout: float) -> Union[RawPage, FailedPage]:
        """
        Fetch a single URL.

        Args:
            url: Absolute URL to fetch
            timeout: Total seconds allowed for the request, body included

        Returns:
            RawPage on a 2xx HTML response, FailedPage otherwise
        """
        if self._client is None:
            raise RuntimeError("PageFetcher must be used as an async context manager")

        if timeout <= 0:
            return FailedPage(url=url, reason="timeout")

        try:
            return await asyncio.wait_for(self._get(url, timeout), timeout)
        except FetchError as e:
            logger.debug(f"Fetch failed: {e.message}")
            return FailedPage(url=url, reason=e.reason)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.debug(f"Fetch timed out after {timeout:.2f}s: {url}")
            return FailedPage(url=url, reason="timeout")
        except httpx.TooManyRedirects:
            logger.debug(f"Too many redirects: {url}")
            return FailedPage(url=url, reason="too_many_redirects")
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as e:
            logger.debug(f"Network error fetching {url}: {e}")
            return FailedPage(url=url, reason="network_error")

    async def _get(self, url: str, timeout: float) -> RawPage:
        async with self._client.stream("GET", url, timeout=httpx.Timeout(timeout)) as response:
            if not response.is_success:
                raise FetchError(f"http_status:{response.status_code}", url)

            content_type = response.headers.get("content-type", "")
            if not self._is_html(content_type):
                raise FetchError("unsupported_content_type", url)

            await response.aread()
            return RawPage(
                url=url,
                final_url=str(response.url),
                html=response.text,
                last_modified_header=response.headers.get("last-modified")
            )

    @staticmethod
    def _is_html(content_type: str) -> bool:
        """Missing content types are given the benefit of the doubt."""
        media_type = content_type.split(";", 1)[0].strip().lower()
        return not media_type or media_type in HTML_CONTENT_TYPES

    def _get_headers(self) -> Dict[str, str]:
        """Get default request headers."""
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.5",
            "Accept-Language": "en-US,en;q=0.9",
        }
