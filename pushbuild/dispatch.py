import asyncio
import logging
from typing import Any, Coroutine

logger = logging.getLogger(__name__)


class Dispatcher:
    """Runs submissions in the background, at most `max_parallel` at a time.

    Queued submissions wait for a free slot; nothing is ever cancelled.
    """

    _semaphore: asyncio.Semaphore
    _tasks: set[asyncio.Task]

    def __init__(self, max_parallel: int):
        if max_parallel < 1:
            raise ValueError('max_parallel must be at least 1')
        self._semaphore = asyncio.Semaphore(max_parallel)
        self._tasks = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, None]):
        task = asyncio.create_task(self._guarded(coro))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _guarded(self, coro: Coroutine[Any, Any, None]):
        async with self._semaphore:
            await coro

    async def wait_idle(self):
        while self._tasks:
            await asyncio.gather(*self._tasks)
