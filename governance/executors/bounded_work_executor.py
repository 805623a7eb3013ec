import asyncio
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Tuple, TypeVar

from utils.logger_utils import get_logger
from utils.progress_logger_utils import ProgressLogger

logger = get_logger("Bounded Work Executor")

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_MAX_WORKERS = 16


class BoundedWorkExecutor:
    """
    Runs one coroutine per work item on a fixed pool of worker tasks that pull
    from a shared queue, so at most `max_workers` requests are in flight.

    Results come back in input order. The first failing item cancels the rest
    of the pool and its exception is re-raised: the caller either gets every
    result or none.
    """

    def __init__(self, max_workers: int, name: str = "work"):
        if max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        self.max_workers = max_workers
        self.name = name
        self.logger = logger

    async def map(self, work_handler: Callable[[T], Awaitable[R]], work_items: Iterable[T]) -> List[R]:
        queue: asyncio.Queue[Tuple[int, T]] = asyncio.Queue()
        for index, item in enumerate(work_items):
            queue.put_nowait((index, item))

        total_items = queue.qsize()
        if total_items == 0:
            return []

        results: List[Optional[R]] = [None] * total_items
        progress_logger = ProgressLogger(name=self.name, logger=self.logger)
        progress_logger.start(total_items=total_items)

        async def worker() -> None:
            while True:
                try:
                    index, item = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                results[index] = await work_handler(item)
                progress_logger.track()

        workers = [asyncio.create_task(worker()) for _ in range(min(self.max_workers, total_items))]
        try:
            await self._wait_all_or_first_failure(workers)
        finally:
            await self._cancel_pending(workers)
            progress_logger.finish()

        return results  # type: ignore[return-value]

    async def _wait_all_or_first_failure(self, workers: List["asyncio.Task[Any]"]) -> None:
        done, _ = await asyncio.wait(workers, return_when=asyncio.FIRST_EXCEPTION)
        # A worker cancelled from outside leaves its item unprocessed
        errors = [
            asyncio.CancelledError(f"{self.name} worker was cancelled") if task.cancelled() else task.exception()
            for task in done
            if task.cancelled() or task.exception() is not None
        ]
        if errors:
            self.logger.debug(f"{self.name} aborted: {errors[0]}")
            raise errors[0]

    @staticmethod
    async def _cancel_pending(workers: List["asyncio.Task[Any]"]) -> None:
        pending = [task for task in workers if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
