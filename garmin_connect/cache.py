"""Lazily populated cache slot with explicit lifecycle states.

EMPTY → POPULATING → POPULATED, and back to EMPTY on invalidate() or when a
population fails or is cancelled. Concurrent first-access callers share one
population through SingleFlight. Each invalidation starts a new generation;
a population belonging to an older generation never stores its value.
"""

from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Generic, TypeVar

import structlog

from garmin_connect.singleflight import SingleFlight

logger = structlog.get_logger()

T = TypeVar("T")


class SlotState(StrEnum):
    EMPTY = "empty"
    POPULATING = "populating"
    POPULATED = "populated"


class CacheSlot(Generic[T]):
    def __init__(self, name: str) -> None:
        self.name = name
        self._value: T | None = None
        self._populated = False
        self._generation = 0
        self._flight = SingleFlight()

    @property
    def state(self) -> SlotState:
        if self._populated:
            return SlotState.POPULATED
        if self._flight.in_flight(self._generation):
            return SlotState.POPULATING
        return SlotState.EMPTY

    @property
    def value(self) -> T | None:
        """The cached value, or None when not populated. Never triggers a fetch."""
        return self._value if self._populated else None

    async def get(self, loader: Callable[[], Awaitable[T]]) -> T:
        if self._populated:
            return self._value  # type: ignore[return-value]
        generation = self._generation
        return await self._flight.do(generation, lambda: self._populate(loader, generation))

    def set(self, value: T) -> None:
        """Replace the cached value wholesale."""
        self._value = value
        self._populated = True

    def invalidate(self) -> None:
        self._generation += 1
        self._value = None
        self._populated = False

    async def _populate(self, loader: Callable[[], Awaitable[T]], generation: int) -> T:
        value = await loader()
        if generation == self._generation:
            self.set(value)
            logger.debug("cache_slot_populated", slot=self.name)
        else:
            logger.debug("cache_slot_population_discarded", slot=self.name)
        return value
