"""
Serialized asyncio worker that owns a Chain.

A Chain is not safe for concurrent use: sampling advances a shared random
source and ingestion mutates every index in place. Requests are therefore
queued to a single consumer task, each carrying its own Future as the
response channel, so at most one job touches the chain at a time.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Iterable, Optional, Tuple

from .chain import Chain, ChainSizes

logger = logging.getLogger(__name__)

Job = Callable[[Chain], Any]


class ChainWorker:
    """
    Single consumer draining a bounded request queue.

    Usage:
        worker = ChainWorker(chain)
        worker.start()            # inside a running event loop
        text = await worker.generate("cat", 40)
        await worker.stop()
    """

    def __init__(self, chain: Chain, queue_size: int = 100, debug: bool = False):
        self.chain = chain
        self.debug = debug
        self._queue: asyncio.Queue[Optional[Tuple[Job, asyncio.Future]]] = asyncio.Queue(
            maxsize=queue_size
        )
        self._task: Optional[asyncio.Task] = None
        self.processed = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def queued(self) -> int:
        """Jobs waiting for the consumer."""
        return self._queue.qsize()

    def start(self) -> None:
        """Start the consumer task on the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("[Worker] Chain worker started")

    async def stop(self) -> None:
        """Let queued jobs finish, then stop the consumer task."""
        if not self.running:
            return
        await self._queue.put(None)
        await self._task
        self._task = None
        logger.info(f"[Worker] Chain worker stopped after {self.processed} jobs")

    async def submit(self, job: Job) -> Any:
        """
        Queue a job and wait for its result.

        Exceptions raised by the job are re-raised here; the worker keeps
        serving later jobs.
        """
        if not self.running:
            raise RuntimeError("chain worker is not running")
        future = asyncio.get_running_loop().create_future()
        await self._queue.put((job, future))
        return await future

    async def generate(self, seed: Optional[str], target_length: int) -> Optional[str]:
        return await self.submit(lambda chain: chain.generate(seed, target_length))

    async def ingest(self, lines: Iterable[str]) -> int:
        lines = list(lines)
        return await self.submit(lambda chain: chain.ingest_source(lines))

    async def sizes(self) -> ChainSizes:
        return await self.submit(lambda chain: chain.describe_sizes())

    async def _run(self) -> None:
        while True:
            work = await self._queue.get()
            if work is None:
                self._queue.task_done()
                break
            job, future = work
            try:
                result = await asyncio.to_thread(job, self.chain)
            except Exception as e:
                logger.error(f"[Worker] Job failed: {e}", exc_info=self.debug)
                if not future.done():
                    future.set_exception(e)
            else:
                if not future.done():
                    future.set_result(result)
            finally:
                self.processed += 1
                self._queue.task_done()

