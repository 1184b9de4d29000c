"""Periodic scheduler dispatching NEXT_STATE to the store."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from models import action as actions
from models.state import State
from core.store import Store

logger = logging.getLogger(__name__)


class Ticker:
    """Runs the tick loop as a background asyncio task."""

    def __init__(self, store: Store, interval: float,
                 on_tick: Optional[Callable[[State], Awaitable[None]]] = None):
        self.store = store
        self.interval = interval
        self.on_tick = on_tick
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"Tick loop started every {self.interval}s")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Tick loop stopped")

    async def tick(self) -> State:
        """Dispatch a single NEXT_STATE and notify the tick callback."""
        state = await self.store.dispatch(actions.next_state())
        if self.on_tick is not None:
            await self.on_tick(state)
        return state

    async def _run(self) -> None:
        while True:
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Tick failed: {str(e)}")
            await asyncio.sleep(self.interval)
