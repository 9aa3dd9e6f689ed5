"""
FastAPI routes for keyword crawling.
"""
from fastapi import APIRouter, Depends, Request, status

from ...crawler.orchestrator import CrawlOrchestrator
from ...models.crawl_result import CrawlResult
from ...models.requests import CrawlRequest
from ...core.security import verify_api_key
from ...core.logging import logger


router = APIRouter()


def get_orchestrator(request: Request) -> CrawlOrchestrator:
    """Orchestrator created in the application lifespan."""
    return request.app.state.orchestrator


@router.post(
    "/crawl",
    response_model=CrawlResult,
    status_code=status.HTTP_200_OK,
    summary="Crawl domains for keywords",
    description="Synchronously crawl each seed's domain within the given budgets and return keyword matches"
)
async def crawl(
    request: CrawlRequest,
    orchestrator: CrawlOrchestrator = Depends(get_orchestrator),
    api_key: str = Depends(verify_api_key)
) -> CrawlResult:
    """
    Crawl one or more domains for keywords.

    - **urls**: Seed URLs (list, or one comma-separated string)
    - **keywords**: Terms to search for
    - **max_depth** / **max_pages** / **max_time_seconds**: Per-domain budgets
    - **follow_pagination**: Follow "next page" links
    - **date_from** / **date_to**: Inclusive page date range

    A domain that cannot be crawled is reported in its own `error` field;
    the request as a whole still succeeds. Malformed requests return 400.
    """
    logger.info(f"Crawl request for {len(request.urls)} URLs")
    return await orchestrator.execute(request)
