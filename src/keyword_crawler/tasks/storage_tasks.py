"""Celery tasks consuming emitted crawl results."""
from typing import Any, Dict
from .celery_app import celery_app
from ..core.config import settings
from ..core.logging import logger
from ..events.storage import ResultStorage


@celery_app.task(bind=True, name=settings.EMITTER_TASK_NAME, max_retries=3)
def store_crawl_result(self, payload: Dict[str, Any]) -> str:
    """Durably store whatever crawl payload arrives."""
    try:
        return ResultStorage().save(payload)
    except OSError as e:
        logger.error(f"Failed to store crawl result: {e}")
        raise self.retry(exc=e, countdown=30)
