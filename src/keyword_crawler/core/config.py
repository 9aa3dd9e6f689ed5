"""Application configuration using Pydantic Settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings."""

    # Application
    APP_NAME: str = "Keyword Crawler"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "./logs"

    # API
    API_V1_PREFIX: str = "/api/v1"
    API_KEY_NAME: str = "X-API-Key"
    API_KEY_SECRET: str = "changeme"
    CORS_ORIGINS: List[str] = ["*"]

    # Crawler
    CRAWLER_MAX_CONCURRENT: int = 8  # ceiling on domains crawled at once
    CRAWLER_PAGE_CONCURRENCY: int = 4  # fetches in flight per domain
    CRAWLER_TIMEOUT: float = 10.0  # per request, clipped to the domain budget
    CRAWLER_MAX_REDIRECTS: int = 5
    CRAWLER_USER_AGENT: Optional[str] = None
    CRAWLER_CONTEXT_CHARS: int = 80
    CRAWLER_WHOLE_WORD_MATCH: bool = True
    CRAWLER_SEED_RETRY_ATTEMPTS: int = 1

    # Result emitter
    EMITTER_ENABLED: bool = False
    EMITTER_QUEUE_SIZE: int = 100
    EMITTER_TASK_NAME: str = "keyword_crawler.store_crawl_result"

    # Celery
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/1"

    # Storage
    STORAGE_DIR: str = "./storage/crawl_results"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )


settings = Settings()
