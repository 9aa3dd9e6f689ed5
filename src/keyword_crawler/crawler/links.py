"""
Link discovery and pagination classification.
"""
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urlparse
import re

from bs4 import BeautifulSoup, Tag

from ..core.logging import logger
from ..utils.url_utils import (
    classify_url_type,
    is_same_domain,
    normalize_url,
    resolve_url,
)


@dataclass
class DiscoveredLinks:
    """In-domain links of a page; ``pagination_links`` is a subset of ``links``."""

    links: List[str] = field(default_factory=list)
    pagination_links: List[str] = field(default_factory=list)


class PaginationClassifier:
    """
    Heuristic "next page" detection.

    Best-effort: false positives cost a fetch, false negatives cost
    coverage. Swap in another classifier with the same ``is_pagination``
    signature to change the heuristics.
    """

    NEXT_TEXTS = {"next", "next page", "next »", "next ›", "next >", "older posts", ">", ">>", "»", "›"}
    NEXT_CLASS = re.compile(r"(^|[-_ ])next($|[-_ ])", re.IGNORECASE)
    CONTAINER_CLASS = re.compile(r"pagination|pager|page-numbers|paging", re.IGNORECASE)
    PAGE_URL = re.compile(r"([?&](page|p|pg)=\d+)|(/page/\d+/?$)", re.IGNORECASE)

    def is_pagination(self, anchor: Tag, url: str) -> bool:
        """
        Decide whether an anchor points to the next page of a listing.

        Args:
            anchor: ``<a>`` or ``<link>`` element
            url: Resolved absolute target URL

        Returns:
            True for pagination links
        """
        rel = [value.lower() for value in (anchor.get("rel") or [])]
        if "next" in rel:
            return True

        classes = " ".join(anchor.get("class") or [])
        if classes and self.NEXT_CLASS.search(classes):
            return True

        label = (anchor.get("aria-label") or "").strip().lower()
        if label.startswith("next"):
            return True

        text = " ".join(anchor.get_text().split()).lower()
        if text in self.NEXT_TEXTS:
            return True

        if text.isdigit():
            if self.PAGE_URL.search(url):
                return True
            return self._inside_pager(anchor)

        return False

    def _inside_pager(self, anchor: Tag) -> bool:
        for parent in anchor.parents:
            if parent.name in ("body", "html", "[document]"):
                break
            classes = " ".join(parent.get("class") or [])
            if self.CONTAINER_CLASS.search(classes) or self.CONTAINER_CLASS.search(parent.get("id") or ""):
                return True
        return False


class LinkDiscoverer:
    """Extracts crawlable in-domain links from a page."""

    def __init__(self, classifier: Optional[PaginationClassifier] = None):
        self.classifier = classifier or PaginationClassifier()

    def discover(self, html: str, base_url: str, seed_url: Optional[str] = None) -> DiscoveredLinks:
        """
        Resolve and filter the links of a page.

        Args:
            html: Raw HTML
            base_url: URL the page was served from
            seed_url: Seed whose registrable domain bounds the crawl
                (defaults to ``base_url``)

        Returns:
            DiscoveredLinks in document order, without duplicates
        """
        soup = BeautifulSoup(html, "html.parser")
        scope_url = seed_url or base_url

        base_tag = soup.find("base", href=True)
        if base_tag:
            base_url = resolve_url(base_url, base_tag["href"].strip())

        result = DiscoveredLinks()
        seen = set()
        paginated = set()

        candidates = soup.find_all("a", href=True) + soup.find_all("link", rel="next", href=True)
        for anchor in candidates:
            url = self._resolve(anchor["href"], base_url, scope_url)
            if url is None:
                continue
            key = normalize_url(url)
            if key not in seen:
                seen.add(key)
                result.links.append(url)
            if key not in paginated and self.classifier.is_pagination(anchor, url):
                paginated.add(key)
                result.pagination_links.append(url)

        logger.debug(
            f"Discovered {len(result.links)} links "
            f"({len(result.pagination_links)} pagination) on {base_url}"
        )
        return result

    @staticmethod
    def _resolve(href: str, base_url: str, scope_url: str) -> Optional[str]:
        href = href.strip()
        if not href or href.startswith("#"):
            return None
        try:
            absolute = resolve_url(base_url, href)
            parsed = urlparse(absolute)
        except ValueError:
            return None
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            return None
        if not is_same_domain(absolute, scope_url):
            return None
        if classify_url_type(absolute) != "page":
            return None
        return parsed._replace(fragment="").geturl()
