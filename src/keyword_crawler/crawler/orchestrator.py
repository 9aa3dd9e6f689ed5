"""
Crawl orchestration: fans a request out over its seeds and aggregates the results.
"""
from datetime import datetime, timezone
from typing import List, Optional
import asyncio
import time

from ..core.config import settings
from ..core.exceptions import EngineError
from ..core.logging import logger
from ..events.emitter import ResultEmitter
from ..models.crawl_result import CrawlResult, CrawlState, DomainResult
from ..models.requests import CrawlRequest
from ..utils.url_utils import normalize_seed
from .domain import DomainCrawler
from .extractor import ContentExtractor
from .fetcher import PageFetcher
from .links import LinkDiscoverer
from .matcher import KeywordMatcher


class CrawlOrchestrator:
    """
    Entry point of the crawl engine.

    Usage::

        async with CrawlOrchestrator() as engine:
            result = await engine.execute(request)

    The orchestrator owns the shared HTTP client for as long as it is
    entered. Calling ``execute`` outside the context opens the client for
    the duration of the call; concurrent calls share it and the last one
    to finish closes it.

    Cancellation of ``execute`` (e.g. an outer timeout in the HTTP layer)
    cancels every domain crawl; no partial result is returned then.
    """

    def __init__(
        self,
        fetcher: Optional[PageFetcher] = None,
        emitter: Optional[ResultEmitter] = None,
        max_concurrent: Optional[int] = None,
        extractor: Optional[ContentExtractor] = None,
        discoverer: Optional[LinkDiscoverer] = None,
        matcher: Optional[KeywordMatcher] = None
    ):
        self.fetcher = fetcher or PageFetcher()
        self.emitter = emitter or ResultEmitter()
        self.max_concurrent = max(1, max_concurrent or settings.CRAWLER_MAX_CONCURRENT)
        self.extractor = extractor or ContentExtractor()
        self.discoverer = discoverer or LinkDiscoverer()
        self.matcher = matcher or KeywordMatcher()

    async def __aenter__(self):
        """Async context manager entry."""
        await self.fetcher.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.fetcher.__aexit__(exc_type, exc_val, exc_tb)
        await self.emitter.close()

    async def execute(self, request: CrawlRequest) -> CrawlResult:
        """
        Crawl every seed of the request and aggregate the results.

        Args:
            request: Validated crawl request

        Returns:
            CrawlResult with one DomainResult per input URL, in input order

        Raises:
            EngineError: If the request is malformed; raised before any I/O
        """
        seeds = self.validate(request)

        async with self.fetcher:
            return await self._execute(request, seeds)

    def validate(self, request: CrawlRequest) -> List[Optional[str]]:
        """
        Check the request shape and normalize its seeds.

        Returns:
            One normalized seed per input URL; None marks an unparsable URL
        """
        if not request.urls:
            raise EngineError("At least one URL is required")
        if not request.keywords:
            raise EngineError("At least one non-empty keyword is required")
        if request.date_from and request.date_to and request.date_from > request.date_to:
            raise EngineError(
                "date_from cannot be after date_to",
                details={"date_from": str(request.date_from), "date_to": str(request.date_to)}
            )

        seeds = [normalize_seed(url) for url in request.urls]
        if not any(seeds):
            raise EngineError("No valid URLs provided", details={"urls": list(request.urls)})
        return seeds

    async def _execute(self, request: CrawlRequest, seeds: List[Optional[str]]) -> CrawlResult:
        crawl_timestamp = datetime.now(timezone.utc)
        start = time.perf_counter()

        concurrency = min(len(seeds), self.max_concurrent)
        semaphore = asyncio.Semaphore(concurrency)
        logger.info(
            f"Starting crawl of {len(seeds)} seeds with concurrency={concurrency}, "
            f"keywords={list(request.keywords)}"
        )

        async def crawl_with_semaphore(seed: str) -> DomainResult:
            async with semaphore:
                crawler = DomainCrawler(
                    seed,
                    request,
                    self.fetcher,
                    extractor=self.extractor,
                    discoverer=self.discoverer,
                    matcher=self.matcher
                )
                return await crawler.crawl()

        async def invalid_seed(url: str) -> DomainResult:
            return DomainResult(url=url, error=f"Invalid URL: {url}", status=CrawlState.FAILED)

        outcomes = await asyncio.gather(
            *[
                crawl_with_semaphore(seed) if seed else invalid_seed(url)
                for url, seed in zip(request.urls, seeds)
            ],
            return_exceptions=True
        )

        # Handle exceptions
        domain_results = []
        for url, outcome in zip(request.urls, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(f"Exception crawling {url}: {outcome!r}")
                domain_results.append(DomainResult(
                    url=url,
                    error=f"Crawl aborted: {outcome}",
                    status=CrawlState.FAILED
                ))
            else:
                domain_results.append(outcome)

        result = CrawlResult(
            results=domain_results,
            total_pages_crawled=sum(r.pages_crawled for r in domain_results),
            total_processing_time_ms=int((time.perf_counter() - start) * 1000),
            crawl_timestamp=crawl_timestamp
        )

        failed = sum(1 for r in domain_results if r.error)
        logger.info(
            f"Crawl complete: {result.total_pages_crawled} pages across "
            f"{len(domain_results) - failed}/{len(domain_results)} domains "
            f"in {result.total_processing_time_ms}ms"
        )

        try:
            self.emitter.emit(result)
        except Exception as e:
            logger.error(f"Could not hand crawl result to emitter: {e}")

        return result
