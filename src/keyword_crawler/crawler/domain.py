"""
Bounded breadth-first crawl of a single domain.
"""
from collections import deque
from datetime import datetime, timezone
from typing import Deque, List, Optional, Set, Tuple, Union
import asyncio

from ..core.config import settings
from ..core.exceptions import DomainError, FetchError, ParseError
from ..core.logging import logger
from ..models.crawl_result import CrawlMetadata, CrawlState, DomainResult, KeywordMatch
from ..models.page import FailedPage, FetchedPage, PageOutcome, RawPage
from ..models.requests import CrawlRequest
from ..utils.content_utils import http_date_to_iso, parse_date, summarize
from ..utils.retry import retry_async
from ..utils.url_utils import is_same_domain, normalize_url
from .extractor import ContentExtractor
from .fetcher import PageFetcher
from .links import LinkDiscoverer
from .matcher import KeywordMatcher


FetchOutcome = Union[RawPage, FailedPage]


class DomainCrawler:
    """
    Crawls one seed's domain within the request's depth, page and time budgets.

    Visit state and frontier belong to this instance alone; create one
    crawler per seed and per request.

    State machine: ``pending -> running -> completed | budgeted | failed``.
    Fetches are issued in batches of up to ``page_concurrency`` and their
    results are processed in frontier order, so page counting never
    overshoots ``max_pages`` and match order follows discovery order.
    """

    def __init__(
        self,
        seed_url: str,
        request: CrawlRequest,
        fetcher: PageFetcher,
        extractor: Optional[ContentExtractor] = None,
        discoverer: Optional[LinkDiscoverer] = None,
        matcher: Optional[KeywordMatcher] = None,
        page_concurrency: Optional[int] = None,
        seed_retry_attempts: Optional[int] = None
    ):
        self.seed_url = seed_url
        self.request = request
        self.fetcher = fetcher
        self.extractor = extractor or ContentExtractor()
        self.discoverer = discoverer or LinkDiscoverer()
        self.matcher = matcher or KeywordMatcher()
        self.page_concurrency = max(1, page_concurrency or settings.CRAWLER_PAGE_CONCURRENCY)
        self.seed_retry_attempts = seed_retry_attempts or settings.CRAWLER_SEED_RETRY_ATTEMPTS

        self.state = CrawlState.PENDING
        self.fetched_urls: List[str] = []

        self._visited: Set[str] = set()
        self._frontier: Deque[Tuple[str, int]] = deque()
        self._matches: List[KeywordMatch] = []
        self._pages_crawled = 0
        self._depth_truncated = False
        self._abandoned = False
        self._scope_url = seed_url
        self._seed_page: Optional[FetchedPage] = None
        self._summary_page: Optional[FetchedPage] = None
        self._started_at: Optional[datetime] = None
        self._start = 0.0
        self._deadline = 0.0

    async def crawl(self) -> DomainResult:
        """
        Run the crawl to a terminal state.

        Returns:
            DomainResult; ``error`` is set only when the seed was unusable
        """
        loop = asyncio.get_running_loop()
        self._started_at = datetime.now(timezone.utc)
        self._start = loop.time()
        self._deadline = self._start + self.request.max_time_seconds
        self._transition(CrawlState.RUNNING)

        self._mark_visited(self.seed_url)
        seed_result = await self._run_until_deadline([self._fetch_seed()])
        seed_outcome = self._settle(seed_result[0], self.seed_url)

        if seed_outcome is None:
            logger.info(f"Time budget exhausted before seed {self.seed_url} responded")
            self._abandoned = True
            return self._finish()

        page = self._process(seed_outcome, is_seed=True)
        if isinstance(page, FailedPage):
            return self._fail(page)

        self._seed_page = page
        self._accept(page, depth=0)

        while self._frontier:
            if self._pages_crawled >= self.request.max_pages:
                logger.debug(f"Page budget of {self.request.max_pages} reached for {self.seed_url}")
                break
            if self._expired():
                logger.debug(f"Time budget reached for {self.seed_url}")
                break

            batch = self._next_batch()
            results = await self._run_until_deadline([self._fetch_page(url) for url, _ in batch])

            for (url, depth), result in zip(batch, results):
                outcome = self._settle(result, url)
                if outcome is None:
                    self._abandoned = True
                    continue
                page = self._process(outcome)
                if isinstance(page, FailedPage):
                    logger.debug(f"Skipping {page.url}: {page.reason}")
                    continue
                self._accept(page, depth)

            if self._abandoned:
                break

        return self._finish()

    # Frontier management

    def _mark_visited(self, url: str) -> bool:
        """Record a URL; False if it was already fetched or enqueued."""
        key = normalize_url(url)
        if key in self._visited:
            return False
        self._visited.add(key)
        return True

    def _enqueue(self, url: str, depth: int):
        if self._mark_visited(url):
            self._frontier.append((url, depth))

    def _next_batch(self) -> List[Tuple[str, int]]:
        size = min(self.page_concurrency, self.request.max_pages - self._pages_crawled)
        batch = []
        while self._frontier and len(batch) < size:
            batch.append(self._frontier.popleft())
        return batch

    def _expand(self, page: FetchedPage, depth: int):
        pagination = {normalize_url(link) for link in page.pagination_links}
        for link in page.links:
            key = normalize_url(link)
            if key in pagination:
                # Next pages continue the listing at the same logical depth
                if self.request.follow_pagination:
                    self._enqueue(link, depth)
                continue
            if depth + 1 <= self.request.max_depth:
                self._enqueue(link, depth + 1)
            elif key not in self._visited:
                self._depth_truncated = True

    # Fetching

    def _remaining(self) -> float:
        return max(0.0, self._deadline - asyncio.get_running_loop().time())

    def _expired(self) -> bool:
        return self._remaining() <= 0.0

    def _request_timeout(self) -> float:
        return min(settings.CRAWLER_TIMEOUT, self._remaining())

    async def _fetch_page(self, url: str) -> FetchOutcome:
        self.fetched_urls.append(url)
        return await self.fetcher.fetch(url, self._request_timeout())

    async def _fetch_seed(self) -> FetchOutcome:
        @retry_async(
            max_attempts=self.seed_retry_attempts,
            min_wait=0.5,
            max_wait=2.0,
            backoff_multiplier=0.5,
            retry_exceptions=(FetchError,),
            should_retry=lambda exc: exc.transient and not self._expired()
        )
        async def attempt() -> RawPage:
            outcome = await self.fetcher.fetch(self.seed_url, self._request_timeout())
            if isinstance(outcome, FailedPage):
                raise FetchError(outcome.reason, outcome.url)
            return outcome

        self.fetched_urls.append(self.seed_url)
        try:
            return await attempt()
        except FetchError as e:
            return FailedPage(url=e.url, reason=e.reason)

    async def _run_until_deadline(self, coros) -> List[Optional[asyncio.Task]]:
        """
        Run fetches concurrently until they finish or the deadline passes.

        Fetches still in flight at the deadline are cancelled and returned
        as None without being awaited.
        """
        tasks = [asyncio.ensure_future(coro) for coro in coros]
        try:
            done, pending = await asyncio.wait(tasks, timeout=self._remaining())
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise

        for task in pending:
            task.cancel()
        return [task if task in done else None for task in tasks]

    def _settle(self, task: Optional[asyncio.Task], url: str) -> Optional[FetchOutcome]:
        """Unwrap the finished fetch of ``url``; None means the fetch was abandoned."""
        if task is None:
            return None
        exc = task.exception()
        if exc is not None:
            logger.error(f"Unexpected failure fetching {url}: {exc!r}", exc_info=exc)
            return FailedPage(url=url, reason="network_error")
        outcome = task.result()
        if isinstance(outcome, FailedPage) and outcome.reason == "timeout" and self._expired():
            # The request timeout is clipped to the budget, so this is the budget firing
            return None
        return outcome

    # Page processing

    def _process(self, outcome: FetchOutcome, is_seed: bool = False) -> PageOutcome:
        if isinstance(outcome, FailedPage):
            return outcome

        if is_seed:
            self._scope_url = outcome.final_url
        elif not is_same_domain(outcome.final_url, self._scope_url):
            return FailedPage(url=outcome.url, reason="off_domain_redirect")
        self._mark_visited(outcome.final_url)

        try:
            content = self.extractor.extract(outcome.html, outcome.final_url)
            discovered = self.discoverer.discover(outcome.html, outcome.final_url, self._scope_url)
        except ParseError as e:
            logger.debug(e.message)
            return FailedPage(url=outcome.url, reason=e.reason)
        except Exception as e:
            logger.warning(f"Unparsable page {outcome.url}: {e}")
            return FailedPage(url=outcome.url, reason="parse_error")

        return FetchedPage(
            url=outcome.url,
            cleaned_text=content.cleaned_text,
            title=content.title,
            links=discovered.links,
            pagination_links=discovered.pagination_links,
            published_date=content.published_date,
            last_modified=content.last_modified or http_date_to_iso(outcome.last_modified_header)
        )

    def _accept(self, page: FetchedPage, depth: int):
        """Count and match an in-range page, then extend the frontier from it."""
        if self.in_date_range(page):
            self._pages_crawled += 1
            self._summary_page = page
            self._matches.extend(
                self.matcher.match(page.cleaned_text, self.request.keywords, page.url, page.title)
            )
        else:
            logger.debug(f"Outside requested date range, not counted: {page.url}")
        self._expand(page, depth)

    def in_date_range(self, page: FetchedPage) -> bool:
        """
        Date filter: included when either date lies in the range.

        Pages without a parseable date are always included.
        """
        date_from = self.request.date_from
        date_to = self.request.date_to
        if date_from is None and date_to is None:
            return True

        dates = [d for d in (parse_date(page.published_date), parse_date(page.last_modified)) if d]
        if not dates:
            return True
        return any(
            (date_from is None or d >= date_from) and (date_to is None or d <= date_to)
            for d in dates
        )

    # Terminal states

    def _transition(self, state: CrawlState):
        logger.debug(f"Domain crawl {self.seed_url}: {self.state.value} -> {state.value}")
        self.state = state

    def _elapsed_ms(self) -> int:
        return int((asyncio.get_running_loop().time() - self._start) * 1000)

    def _fail(self, page: FailedPage) -> DomainResult:
        cause = ParseError(page.url) if page.reason == "parse_error" else FetchError(page.reason, page.url)
        error = DomainError(self.seed_url, cause)
        self._transition(CrawlState.FAILED)
        logger.warning(f"Domain crawl failed: {error.message}")
        return DomainResult(
            url=self.seed_url,
            error=error.message,
            status=self.state
        )

    def _finish(self) -> DomainResult:
        has_more = bool(self._frontier) or self._abandoned or self._depth_truncated
        self._transition(CrawlState.BUDGETED if has_more else CrawlState.COMPLETED)

        logger.info(
            f"Domain crawl {self.seed_url} {self.state.value}: "
            f"{self._pages_crawled} pages, {len(self._matches)} matches, "
            f"has_more_pages={has_more}"
        )
        return DomainResult(
            url=self.seed_url,
            title=self._seed_page.title if self._seed_page else None,
            matches=self._matches,
            pages_crawled=self._pages_crawled,
            has_more_pages=has_more,
            metadata=self._build_metadata(),
            status=self.state
        )

    def _build_metadata(self) -> CrawlMetadata:
        page = self._seed_page
        if page is not None and self._summary_page is not None and not self.in_date_range(page):
            page = self._summary_page

        return CrawlMetadata(
            crawl_timestamp=self._started_at,
            total_processing_time_ms=self._elapsed_ms(),
            content_summary=summarize(page.cleaned_text) if page else None,
            last_modified=page.last_modified if page else None,
            published_date=page.published_date if page else None
        )
