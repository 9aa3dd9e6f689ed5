"""
Fire-and-forget hand-off of finished crawl results to the messaging layer.
"""
from typing import Any, Dict, Optional
import asyncio

from ..core.config import settings
from ..core.logging import logger
from ..models.crawl_result import CrawlResult


class CeleryPublisher:
    """Publishes payloads by name to the storage task on the Celery broker."""

    def __init__(self, task_name: Optional[str] = None, app=None):
        self.task_name = task_name or settings.EMITTER_TASK_NAME
        self._app = app

    @property
    def app(self):
        if self._app is None:
            from ..tasks.celery_app import celery_app
            self._app = celery_app
        return self._app

    async def publish(self, payload: Dict[str, Any]):
        """Send one payload; kombu is blocking, so it runs in a worker thread."""
        await asyncio.to_thread(self.app.send_task, self.task_name, args=[payload])


class ResultEmitter:
    """
    Bounded, non-blocking queue in front of a publisher.

    ``emit`` never waits: when the queue is full the result is dropped and
    logged. A background task drains the queue and makes exactly one
    publish attempt per result.
    """

    def __init__(
        self,
        publisher=None,
        max_queue_size: Optional[int] = None,
        enabled: Optional[bool] = None
    ):
        self.publisher = publisher or CeleryPublisher()
        self.max_queue_size = max_queue_size or settings.EMITTER_QUEUE_SIZE
        self.enabled = settings.EMITTER_ENABLED if enabled is None else enabled
        self.published = 0
        self.dropped = 0
        self.failed = 0
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None

    def emit(self, result: CrawlResult) -> bool:
        """
        Queue a result for publishing.

        Args:
            result: Finished crawl result

        Returns:
            True if queued, False if disabled or dropped
        """
        if not self.enabled:
            return False

        self._ensure_worker()
        try:
            self._queue.put_nowait(result)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                f"Emitter queue full ({self.max_queue_size}), dropping crawl result "
                f"from {result.crawl_timestamp.isoformat()}"
            )
            return False
        return True

    def _ensure_worker(self):
        if self._queue is None:
            self._queue = asyncio.Queue(maxsize=self.max_queue_size)
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(self._drain())

    async def _drain(self):
        while True:
            result = await self._queue.get()
            try:
                await self.publisher.publish(result.model_dump(mode="json"))
                self.published += 1
            except Exception as e:
                self.failed += 1
                logger.error(f"Failed to publish crawl result: {e}")
            finally:
                self._queue.task_done()

    async def flush(self, timeout: float = 5.0):
        """Wait until queued results have been attempted, at most ``timeout`` seconds."""
        if self._queue is None:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Emitter flush timed out with {self._queue.qsize()} results pending")

    async def close(self, timeout: float = 5.0):
        """Flush and stop the background worker."""
        await self.flush(timeout)
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None
