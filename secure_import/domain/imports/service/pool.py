"""Bounded fan-out of image imports over a shared work queue."""

import asyncio
import logging
import os
from typing import Sequence

from secure_import.domain.discovery.model.reference import ImageReference
from secure_import.domain.imports.model.outcome import ImportOutcome
from secure_import.domain.imports.service.pipeline import ImportPipeline

logger = logging.getLogger(__name__)

MAX_WORKERS = 4


def worker_count(images: int, max_workers: int = MAX_WORKERS, cpus: int | None = None) -> int:
    """min(max_workers, CPU count, number of images), never above MAX_WORKERS.

    At least one worker runs whenever there are images.
    """
    if images <= 0:
        return 0
    cpus = cpus if cpus is not None else (os.cpu_count() or 1)
    return max(1, min(MAX_WORKERS, max_workers, cpus, images))


class WorkerPool:
    """Runs the import pipeline for many images with bounded concurrency.

    Each worker drains the pre-populated queue until it is empty. A failing
    image becomes a failed outcome for that image only; the other workers and
    the rest of the queue are unaffected. Outcomes come back in completion
    order, one per input reference.
    """

    def __init__(
        self,
        pipeline: ImportPipeline,
        max_workers: int = MAX_WORKERS,
        cpus: int | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._max_workers = max_workers
        self._cpus = cpus

    async def run(self, references: Sequence[ImageReference]) -> list[ImportOutcome]:
        count = worker_count(len(references), self._max_workers, self._cpus)
        if count == 0:
            return []

        queue: asyncio.Queue[ImageReference] = asyncio.Queue()
        for reference in references:
            queue.put_nowait(reference)

        logger.info("Processing %d images with %d worker(s)", len(references), count)
        workers = [
            asyncio.create_task(self._work(worker_id, queue), name=f"import-worker-{worker_id}")
            for worker_id in range(1, count + 1)
        ]
        batches = await asyncio.gather(*workers)
        return [outcome for batch in batches for outcome in batch]

    async def _work(self, worker_id: int, queue: asyncio.Queue[ImageReference]) -> list[ImportOutcome]:
        outcomes: list[ImportOutcome] = []
        while True:
            try:
                reference = queue.get_nowait()
            except asyncio.QueueEmpty:
                return outcomes

            logger.info("Worker %d processing: %s", worker_id, reference)
            try:
                outcome = await self._pipeline.run(reference)
            except Exception as e:
                logger.error("[Worker %d] Failed to process image %s: %s", worker_id, reference, e)
                outcome = ImportOutcome.failed(reference, e)
            finally:
                queue.task_done()
            outcomes.append(outcome)
