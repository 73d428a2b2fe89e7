"""Runtime that owns a state value, applies a reducer and runs the effects."""

import asyncio
import logging
from typing import Any, Callable, Generic, List, Sequence, Set, Tuple, TypeVar

from .effects import Effect, EffectExecutor
from .persistence import PersistenceService

logger = logging.getLogger(__name__)

StateT = TypeVar("StateT")
Reducer = Callable[[StateT, Any], Tuple[StateT, Sequence[Effect]]]


class Store(Generic[StateT]):
    """Single owner of a state value.

    ``send`` runs the reducer synchronously, commits the new state and
    notifies subscribers before any effect starts, so the optimistic change
    is visible immediately. Effects are then scheduled as tasks on the
    running event loop; their follow-up actions are sent back to this store.
    Effects are independent of each other and are never cancelled.
    """

    def __init__(self, state: StateT, reducer: Reducer, service: PersistenceService):
        self._state = state
        self._reducer = reducer
        self._executor = EffectExecutor(service)
        self._subscribers: List[Callable[[StateT], None]] = []
        self._tasks: Set["asyncio.Task[None]"] = set()

    @property
    def state(self) -> StateT:
        """The current state snapshot. State values are frozen."""
        return self._state

    @property
    def service(self) -> PersistenceService:
        return self._executor.service

    def subscribe(self, callback: Callable[[StateT], None]) -> Callable[[], None]:
        """Registers a callback invoked with every new state.

        Returns:
            A function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def send(self, action: Any) -> List["asyncio.Task[None]"]:
        """Applies an action and schedules the effects it produced.

        Must be called while an event loop is running if the action can
        produce effects.

        Returns:
            The tasks running the scheduled effects.

        Raises:
            RuntimeError: If the action produced effects and no event loop is
                running. The state is left unchanged.
        """
        state, effects = self._reducer(self._state, action)
        loop = asyncio.get_running_loop() if effects else None
        self._state = state
        for callback in list(self._subscribers):
            callback(self._state)
        return [self._schedule(loop, effect) for effect in effects]

    def _schedule(self, loop: asyncio.AbstractEventLoop, effect: Effect) -> "asyncio.Task[None]":
        task = loop.create_task(self._run(effect))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, effect: Effect) -> None:
        follow_up = await self._executor.execute(effect)
        if follow_up is not None:
            self.send(follow_up)

    @property
    def has_pending_effects(self) -> bool:
        return bool(self._tasks)

    async def settle(self) -> None:
        """Waits until every effect, including follow-ups, has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
