"""Health check endpoints."""
from fastapi import APIRouter, Depends, Request
from typing import Dict, Any
import psutil
import time

from ...core.config import settings
from ...core.security import verify_api_key


router = APIRouter()


@router.get("/health", summary="Basic health check")
async def health_check() -> Dict[str, Any]:
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.APP_VERSION,
        "service": settings.APP_NAME
    }


@router.get("/health/detailed", summary="Detailed health check")
async def detailed_health_check(
    request: Request,
    api_key: str = Depends(verify_api_key)
) -> Dict[str, Any]:
    """Detailed health check with system metrics and emitter counters."""
    memory = psutil.virtual_memory()
    emitter = request.app.state.orchestrator.emitter

    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.APP_VERSION,
        "service": settings.APP_NAME,
        "system": {
            "memory_percent": memory.percent,
            "cpu_percent": psutil.cpu_percent(interval=None)
        },
        "emitter": {
            "enabled": emitter.enabled,
            "published": emitter.published,
            "dropped": emitter.dropped,
            "failed": emitter.failed
        },
        "configuration": {
            "max_concurrent": settings.CRAWLER_MAX_CONCURRENT,
            "page_concurrency": settings.CRAWLER_PAGE_CONCURRENCY,
            "timeout": settings.CRAWLER_TIMEOUT
        }
    }
