"""
Keyword matching and relevance scoring over cleaned page text.
"""
from typing import List, Optional, Sequence
import re

from ..core.config import settings
from ..models.crawl_result import KeywordMatch


# Occurrences per 1000 characters at which the density component saturates
DENSITY_SATURATION = 5.0

DENSITY_WEIGHT = 0.6
POSITION_WEIGHT = 0.2
TITLE_WEIGHT = 0.2


class KeywordMatcher:
    """
    Finds keyword occurrences in cleaned text.

    Pure and synchronous; safe to share between domain crawlers.
    """

    def __init__(
        self,
        context_chars: Optional[int] = None,
        whole_words: Optional[bool] = None
    ):
        self.context_chars = context_chars if context_chars is not None else settings.CRAWLER_CONTEXT_CHARS
        self.whole_words = settings.CRAWLER_WHOLE_WORD_MATCH if whole_words is None else whole_words

    def match(
        self,
        cleaned_text: str,
        keywords: Sequence[str],
        source_url: str,
        title: Optional[str] = None
    ) -> List[KeywordMatch]:
        """
        Match every keyword against one page.

        Args:
            cleaned_text: Cleaned page text, shared by all resulting matches
            keywords: Keywords in request order
            source_url: URL of the page
            title: Page title, boosts relevance when it contains the keyword

        Returns:
            One KeywordMatch per keyword that occurs at least once, in
            keyword order
        """
        matches = []
        if not cleaned_text:
            return matches

        for keyword in keywords:
            pattern = self._compile(keyword)
            if pattern is None:
                continue
            occurrences = list(pattern.finditer(cleaned_text))
            if not occurrences:
                continue

            first = occurrences[0]
            in_title = bool(title and pattern.search(title))
            matches.append(KeywordMatch(
                keyword=keyword,
                context=self.build_context(cleaned_text, first.start(), first.end()),
                cleaned_text=cleaned_text,
                count=len(occurrences),
                relevance_score=self.score(len(occurrences), first.start(), len(cleaned_text), in_title),
                source_url=source_url
            ))

        return matches

    def _compile(self, keyword: str) -> Optional[re.Pattern]:
        keyword = keyword.strip()
        if not keyword:
            return None
        escaped = re.escape(keyword)
        if self.whole_words:
            escaped = rf"(?<!\w){escaped}(?!\w)"
        return re.compile(escaped, re.IGNORECASE)

    def build_context(self, text: str, start: int, end: int) -> str:
        """
        Window of ``context_chars`` around ``text[start:end]``.

        Cut points move inward to the nearest word boundary so no word is
        split; ``...`` marks a truncated side.
        """
        left = max(0, start - self.context_chars)
        right = min(len(text), end + self.context_chars)

        if left > 0 and not text[left - 1].isspace():
            space = text.find(" ", left, start)
            left = space + 1 if space != -1 else start
        if right < len(text) and not text[right].isspace():
            space = text.rfind(" ", end, right)
            right = space if space != -1 else end

        snippet = text[left:right].strip()
        if left > 0:
            snippet = "..." + snippet
        if right < len(text):
            snippet = snippet + "..."
        return snippet

    @staticmethod
    def score(count: int, first_position: int, text_length: int, in_title: bool) -> float:
        """
        Relevance in [0, 1] from density, first-occurrence position and title presence.

        Args:
            count: Occurrences on the page
            first_position: Character offset of the first occurrence
            text_length: Length of the cleaned text
            in_title: Whether the title contains the keyword

        Returns:
            Score rounded to 4 decimal places
        """
        if count <= 0 or text_length <= 0:
            return 0.0

        density = count * 1000.0 / text_length
        density_component = min(density / DENSITY_SATURATION, 1.0)
        position_component = 1.0 - min(first_position / text_length, 1.0)
        title_component = 1.0 if in_title else 0.0

        score = (
            DENSITY_WEIGHT * density_component
            + POSITION_WEIGHT * position_component
            + TITLE_WEIGHT * title_component
        )
        return round(min(max(score, 0.0), 1.0), 4)
