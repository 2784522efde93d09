import asyncio
import contextlib
from collections.abc import AsyncIterator
from weakref import WeakValueDictionary


class EventLocks:
    """One ``asyncio.Lock`` per event slug.

    Bookings for the same event run one at a time inside this process;
    different events never wait on each other. Locks are dropped once no
    caller holds a reference.
    """

    def __init__(self) -> None:
        self._locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()

    def get(self, event_slug: str) -> asyncio.Lock:
        lock = self._locks.get(event_slug)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[event_slug] = lock
        return lock

    @contextlib.asynccontextmanager
    async def hold(self, event_slug: str) -> AsyncIterator[None]:
        lock = self.get(event_slug)
        async with lock:
            yield


event_locks = EventLocks()
