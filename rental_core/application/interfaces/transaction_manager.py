from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol


class TransactionManager(Protocol):
    """Unidad de trabajo: todo lo escrito dentro de `start()` se confirma junto."""

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        yield
