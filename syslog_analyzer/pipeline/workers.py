"""
Bounded worker pool for real-time enrichment.
"""

import asyncio
import logging
from typing import Callable, List, Optional, Tuple

from syslog_analyzer.llm.analyzer import EnrichmentClient
from syslog_analyzer.models.enrichment import EnrichmentConfig
from syslog_analyzer.models.log_entry import LogEntry


logger = logging.getLogger(__name__)

Job = Tuple[LogEntry, EnrichmentConfig]


class EnrichmentPool:
    """
    Fixed number of asyncio workers consuming an enrichment queue.

    submit() never blocks: jobs are queued and picked up by the first free
    worker, so at most `concurrency` requests are in flight. Each result is
    handed to `on_result` as soon as it arrives; results can therefore come
    back in a different order than they were submitted.

    Workers start lazily on the first submit() inside a running event loop.
    """

    def __init__(
        self,
        analyzer: EnrichmentClient,
        on_result: Callable[[LogEntry], None],
        concurrency: int = 4,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.analyzer = analyzer
        self.on_result = on_result
        self.concurrency = concurrency
        self._queue: Optional[asyncio.Queue] = None
        self._workers: List[asyncio.Task] = []
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def pending(self) -> int:
        """Jobs queued but not yet picked up."""
        return self._queue.qsize() if self._queue is not None else 0

    @property
    def running(self) -> bool:
        return bool(self._workers)

    def submit(self, entry: LogEntry, config: EnrichmentConfig) -> bool:
        """
        Queue an entry for enrichment.

        Returns:
            False if there is no running event loop to process the job
        """
        try:
            self._ensure_started()
        except RuntimeError:
            logger.warning("No running event loop, enrichment skipped for %s", entry.id)
            return False

        self._queue.put_nowait((entry, config))
        return True

    async def join(self) -> None:
        """Wait until every queued job has been processed."""
        if self._queue is not None and self._loop is asyncio.get_running_loop():
            await self._queue.join()

    async def close(self) -> None:
        """Cancel the workers. Queued jobs are dropped."""
        workers, self._workers = self._workers, []
        for task in workers:
            task.cancel()
        if workers and self._loop is asyncio.get_running_loop():
            await asyncio.gather(*workers, return_exceptions=True)
        self._queue = None
        self._loop = None

    def _ensure_started(self) -> None:
        loop = asyncio.get_running_loop()
        if self._workers and self._loop is loop:
            return

        if self._workers:
            logger.warning("Event loop changed, restarting enrichment workers (%d jobs dropped)", self.pending)
            self._cancel_stale_workers()

        self._loop = loop
        self._queue = asyncio.Queue()
        self._workers = [
            loop.create_task(self._worker(n), name=f"enrichment-worker-{n}")
            for n in range(self.concurrency)
        ]
        logger.debug("Started %d enrichment workers", self.concurrency)

    def _cancel_stale_workers(self) -> None:
        old_loop, workers = self._loop, self._workers
        self._workers = []
        if old_loop is None or old_loop.is_closed():
            return

        # The old loop may be running in another thread
        for task in workers:
            try:
                old_loop.call_soon_threadsafe(task.cancel)
            except RuntimeError:
                # Closed in the meantime; its tasks can no longer run
                break

    async def _worker(self, number: int) -> None:
        queue = self._queue
        while True:
            entry, config = await queue.get()
            try:
                result = await self.analyzer.analyze(entry, config)
                self.on_result(result)
            except Exception:
                # Keep the worker alive whatever a single job does
                logger.exception("Enrichment worker %d failed on %s", number, entry.id)
            finally:
                queue.task_done()
