"""
Content extraction: cleaned text, title and publication dates from HTML.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from bs4 import BeautifulSoup, Comment

from ..core.exceptions import ParseError
from ..core.logging import logger
from ..utils.content_utils import BOILERPLATE_TAGS, collapse_whitespace


@dataclass
class ExtractedContent:
    """Text and metadata pulled from one HTML document."""

    cleaned_text: str
    title: Optional[str] = None
    published_date: Optional[str] = None
    last_modified: Optional[str] = None


class MetaDateExtractor:
    """
    Reads published/modified dates from structured page metadata.

    Values are returned exactly as the page states them; parsing happens
    when the date filter is applied.
    """

    PUBLISHED_PROPERTIES = ("article:published_time", "og:published_time")
    MODIFIED_PROPERTIES = ("article:modified_time", "article:updated_time", "og:updated_time")
    PUBLISHED_NAMES = ("date", "publish-date", "publication-date", "pubdate", "dc.date", "dcterms.created")
    MODIFIED_NAMES = ("last-modified", "date-modified", "dcterms.modified")

    def extract_dates(self, soup: BeautifulSoup) -> Tuple[Optional[str], Optional[str]]:
        """
        Return ``(published_date, last_modified)``.

        Args:
            soup: Parsed document

        Returns:
            Tuple of raw date strings, either may be None
        """
        published = None
        modified = None

        for meta in soup.find_all("meta"):
            content = (meta.get("content") or "").strip()
            if not content:
                continue
            prop = (meta.get("property") or "").lower()
            name = (meta.get("name") or "").lower()
            itemprop = (meta.get("itemprop") or "").lower()

            if prop in self.PUBLISHED_PROPERTIES or name in self.PUBLISHED_NAMES or itemprop == "datepublished":
                published = published or content
            elif prop in self.MODIFIED_PROPERTIES or name in self.MODIFIED_NAMES or itemprop == "datemodified":
                modified = modified or content

        if published is None:
            time_tag = soup.find("time", attrs={"datetime": True})
            if time_tag:
                published = time_tag["datetime"].strip() or None

        return published, modified


class ContentExtractor:
    """Turns fetched HTML into the single text block used for matching."""

    def __init__(self, date_extractor: Optional[MetaDateExtractor] = None):
        self.date_extractor = date_extractor or MetaDateExtractor()

    def extract(self, html: str, url: str) -> ExtractedContent:
        """
        Extract cleaned text, title and dates.

        Args:
            html: Raw HTML
            url: Page URL, used for error reporting

        Returns:
            ExtractedContent

        Raises:
            ParseError: If the document cannot be parsed
        """
        if html is None:
            raise ParseError(url, "empty body")

        try:
            soup = BeautifulSoup(html, "html.parser")
        except Exception as e:
            raise ParseError(url, str(e)) from e

        if soup.find() is None and "<" in html:
            # Markup that yields no elements at all is not a usable page
            raise ParseError(url, "no elements found")

        title = self._extract_title(soup)
        published, modified = self.date_extractor.extract_dates(soup)

        for element in soup(BOILERPLATE_TAGS):
            element.decompose()
        for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
            comment.extract()

        body = soup.body or soup
        cleaned_text = collapse_whitespace(body.get_text(separator=" "))

        logger.debug(f"Extracted {len(cleaned_text)} characters from {url}")
        return ExtractedContent(
            cleaned_text=cleaned_text,
            title=title,
            published_date=published,
            last_modified=modified
        )

    @staticmethod
    def _extract_title(soup: BeautifulSoup) -> Optional[str]:
        if soup.title and soup.title.get_text(strip=True):
            return collapse_whitespace(soup.title.get_text())
        for heading in ("h1", "h2"):
            tag = soup.find(heading)
            if tag and tag.get_text(strip=True):
                return collapse_whitespace(tag.get_text())
        return None
