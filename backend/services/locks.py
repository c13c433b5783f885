import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager


class KeyedLock:
    """Per-key asyncio locks; serializes mutations of one document id
    without blocking work on other ids."""

    def __init__(self):
        self._locks = defaultdict(asyncio.Lock)
        self._waiters = defaultdict(int)

    @asynccontextmanager
    async def hold(self, key: str):
        self._waiters[key] += 1
        lock = self._locks[key]
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    def __len__(self):
        return len(self._locks)
