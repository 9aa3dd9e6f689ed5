"""
FastAPI application exposing the keyword crawl engine.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from ..core.config import settings
from ..core.logging import logger
from ..crawler.orchestrator import CrawlOrchestrator
from .exceptions import exception_handlers
from .middleware import add_process_time_header
from .routes import crawl, health


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager."""
    logger.info(f"Starting Keyword Crawler API ({settings.APP_ENV})")
    async with CrawlOrchestrator() as orchestrator:
        app.state.orchestrator = orchestrator
        yield
    logger.info("Shutting down Keyword Crawler API")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Budget-bounded domain crawler with keyword matching",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    exception_handlers=exception_handlers
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add custom middleware
app.middleware("http")(add_process_time_header)


# Include routers
app.include_router(
    crawl.router,
    prefix=settings.API_V1_PREFIX,
    tags=["crawling"]
)

app.include_router(
    health.router,
    prefix=settings.API_V1_PREFIX,
    tags=["health"]
)


# Root endpoint
@app.get("/", tags=["root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "description": "Budget-bounded domain crawler with keyword matching",
        "docs": "/docs",
        "health": f"{settings.API_V1_PREFIX}/health"
    }


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "type": "internal_error"
        }
    )
