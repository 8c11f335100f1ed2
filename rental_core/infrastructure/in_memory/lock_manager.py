import asyncio
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager

from rental_core.application.interfaces.lock_manager import LockKey, LockManager


class InMemoryLockManager(LockManager):
    """
    Un `asyncio.Lock` por llave, dentro de un único event loop.

    Las llaves pedidas juntas se toman en orden de rango y se liberan en
    orden inverso. Los locks no son reentrantes. Una llave sin dueño ni
    esperas se descarta al liberarse.
    """

    def __init__(self) -> None:
        self._locks: dict[LockKey, asyncio.Lock] = {}
        # Dueño actual más tareas esperando, por llave
        self._users: dict[LockKey, int] = {}

    def __len__(self) -> int:
        """Cantidad de llaves en uso."""
        return len(self._locks)

    @asynccontextmanager
    async def _hold(self, key: LockKey) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]

    @asynccontextmanager
    async def acquire(self, *keys: LockKey) -> AsyncIterator[None]:
        ordered = sorted(set(keys), key=lambda k: k.rank)
        async with AsyncExitStack() as stack:
            for key in ordered:
                await stack.enter_async_context(self._hold(key))
            yield
