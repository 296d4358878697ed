"""
In-flight de-duplication for coroutine loads.

Concurrent callers asking for the same key share one running task instead of
starting a second load. Waiters are shielded so that one caller being
cancelled does not cancel the load for everybody else.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Generic, Hashable, TypeVar

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """Collapse concurrent loads for a key into a single task."""

    def __init__(self) -> None:
        self._tasks: dict[Hashable, asyncio.Task[T]] = {}

    def in_flight(self, key: Hashable) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    async def run(self, key: Hashable, loader: Callable[[], Awaitable[T]]) -> T:
        """
        Run loader for key, or join the load already running for it.

        Args:
            key: De-duplication key
            loader: Zero-argument coroutine function producing the value

        Returns:
            The loaded value (exceptions propagate to every waiter)
        """
        task = self._tasks.get(key)
        if task is None or task.done():
            task = asyncio.get_running_loop().create_task(loader())
            self._tasks[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))
        return await asyncio.shield(task)

    def _forget(self, key: Hashable, task: asyncio.Task[T]) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
        # Mark the exception retrieved for loads whose waiters are gone.
        if not task.cancelled():
            task.exception()

    def cancel_all(self) -> int:
        """Cancel every running load. Returns how many were cancelled."""
        cancelled = 0
        for task in list(self._tasks.values()):
            if not task.done():
                task.cancel()
                cancelled += 1
        self._tasks.clear()
        return cancelled
