"""Store holding the current snapshot and applying actions one at a time."""

import asyncio
import logging
from typing import List, Optional

from models.action import Action
from models.state import INITIAL_STATE, State
from core.exceptions import ProtocolError
from core.reducer import StateReducer

logger = logging.getLogger(__name__)


class Store:
    """
    Single-writer owner of the reducer state.

    Dispatches are serialized with an asyncio lock so no action ever sees a
    half-applied snapshot. Subscribers receive every new snapshot through
    their own bounded queue.
    """

    def __init__(self, reducer: StateReducer, initial_state: Optional[State] = None, queue_size: int = 16):
        """
        Initialize the store.

        Args:
            reducer: Reducer used to compute every next state
            initial_state: Starting snapshot, empty when omitted
            queue_size: Maximum snapshots buffered per subscriber
        """
        self.reducer = reducer
        self.state = initial_state if initial_state is not None else INITIAL_STATE
        self.version = 1
        self.queue_size = queue_size
        self._mutex = asyncio.Lock()
        self._subscribers: List[asyncio.Queue] = []

    def get_state(self) -> State:
        """Get the current snapshot."""
        return self.state

    def get_version(self) -> int:
        """Get the number of state changes applied so far, starting at 1."""
        return self.version

    async def dispatch(self, action: Action) -> State:
        """
        Apply an action and publish the resulting snapshot.

        Raises:
            ProtocolError: If the reducer rejects the action; the current
                state is kept
        """
        async with self._mutex:
            try:
                next_state = self.reducer(self.state, action)
            except ProtocolError as e:
                logger.error(f"Rejected {action.type.name}: {str(e)}")
                raise

            if next_state is self.state:
                return next_state

            self.state = next_state
            self.version += 1

        self._publish(next_state)
        return next_state

    def subscribe(self) -> asyncio.Queue:
        """Register a queue that receives every new snapshot."""
        queue = asyncio.Queue(maxsize=self.queue_size)
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def _publish(self, state: State) -> None:
        for queue in self._subscribers:
            if queue.full():
                # Slow subscribers only need the latest snapshots.
                queue.get_nowait()
            queue.put_nowait(state)
