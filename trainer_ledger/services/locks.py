"""In-process per-trainer locks

Serializes coroutines of one worker that touch the same trainer. Workers
in other processes are serialized by the FOR UPDATE row lock taken in
LedgerService.trainer_unit.
"""
import asyncio
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator


class TrainerLockRegistry:
    """Hands out one asyncio.Lock per trainer id

    Locks are weakly referenced, so a trainer's lock disappears once no
    coroutine holds or waits on it.
    """

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def get(self, trainer_id: str) -> asyncio.Lock:
        lock = self._locks.get(trainer_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[trainer_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, trainer_id: str) -> AsyncIterator[None]:
        lock = self.get(trainer_id)
        async with lock:
            yield

    def __len__(self):
        return len(self._locks)


trainer_locks = TrainerLockRegistry()
