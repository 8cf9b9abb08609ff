"""
Fixed-interval background jobs run inside the application lifespan.
"""

import asyncio
import logging
from typing import Callable, Optional

from starlette.concurrency import run_in_threadpool

logger = logging.getLogger("jobboard.scheduler")


class PeriodicTask:
    """
    Runs a blocking callback every ``interval`` seconds in the thread pool.

    A failing run is logged and the loop carries on with the next tick.
    """

    def __init__(self, name: str, interval: float, func: Callable[[], object]):
        self.name = name
        self.interval = interval
        self.func = func
        self._task: Optional[asyncio.Task] = None

    async def run_once(self) -> None:
        try:
            result = await run_in_threadpool(self.func)
            logger.debug("Task %s finished: %s", self.name, result)
        except Exception:
            logger.exception("Task %s failed", self.name)

    async def _loop(self) -> None:
        logger.info("Task %s scheduled every %ss", self.name, self.interval)
        while True:
            await asyncio.sleep(self.interval)
            await self.run_once()

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._loop(), name=self.name)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Task %s stopped", self.name)
