"""Custom exception handlers."""
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from ..core.exceptions import CrawlerException, EngineError
from ..core.logging import logger


async def crawler_exception_handler(request: Request, exc: CrawlerException):
    """Handle crawler-specific exceptions."""
    logger.error(f"Crawler error: {exc.message}", extra={"details": exc.details})

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "type": "crawler_error",
            "details": exc.details
        }
    )


async def engine_exception_handler(request: Request, exc: EngineError):
    """Malformed crawl requests are the caller's fault."""
    logger.warning(f"Rejected crawl request: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "type": "invalid_request",
            "details": exc.details
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with proper logging."""
    logger.warning(
        f"HTTP error: {exc.status_code} - {exc.detail}",
        extra={"path": str(request.url), "method": request.method}
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "type": "http_error"
        }
    )


# Exception handler registry
exception_handlers = {
    EngineError: engine_exception_handler,
    CrawlerException: crawler_exception_handler,
    HTTPException: http_exception_handler,
}
