"""Keyed single-flight guard for coroutines.

While a call for a key is in flight, every other caller of the same key
awaits that call's outcome (result or exception) instead of starting its own.

Cancellation: a waiter cancelled while others are still waiting detaches and
the shared call keeps running. When the last waiter is cancelled, the shared
call is cancelled with it.
"""

import asyncio
from collections.abc import Awaitable, Callable, Hashable
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class _Call(Generic[T]):
    __slots__ = ("task", "waiters")

    def __init__(self, task: asyncio.Task[T]) -> None:
        self.task = task
        self.waiters = 0


class SingleFlight:
    def __init__(self) -> None:
        self._calls: dict[Hashable, _Call[Any]] = {}

    def in_flight(self, key: Hashable) -> bool:
        return key in self._calls

    async def do(self, key: Hashable, fn: Callable[[], Awaitable[T]]) -> T:
        call = self._calls.get(key)
        if call is None:
            call = _Call(asyncio.ensure_future(fn()))
            self._calls[key] = call
            call.task.add_done_callback(lambda t, c=call: self._forget(key, c))

        call.waiters += 1
        try:
            return await asyncio.shield(call.task)
        except asyncio.CancelledError:
            if not call.task.done() and call.waiters == 1:
                # Later callers must start a fresh call, not join the cancelled one.
                if self._calls.get(key) is call:
                    del self._calls[key]
                call.task.cancel()
            raise
        finally:
            call.waiters -= 1

    def _forget(self, key: Hashable, call: _Call[Any]) -> None:
        if self._calls.get(key) is call:
            del self._calls[key]
        # Waiters may all have detached; mark the outcome as retrieved.
        if not call.task.cancelled():
            call.task.exception()
