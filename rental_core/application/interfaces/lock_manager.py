from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Protocol

# Orden global de adquisición. Quien necesite varias llaves las pide en una
# sola llamada a `acquire`, que las ordena con este rango.
LOCK_ORDER = {"vehicle": 0, "payment": 1, "reservation": 2}


@dataclass(frozen=True)
class LockKey:
    scope: str
    key: int

    @property
    def rank(self) -> tuple[int, int]:
        return LOCK_ORDER[self.scope], self.key


def vehicle_lock(vehicle_id: int) -> LockKey:
    return LockKey("vehicle", vehicle_id)


def payment_lock(payment_id: int) -> LockKey:
    return LockKey("payment", payment_id)


def reservation_lock(reservation_id: int) -> LockKey:
    return LockKey("reservation", reservation_id)


class LockManager(Protocol):
    def acquire(self, *keys: LockKey) -> AbstractAsyncContextManager[None]:
        """Exclusión mutua por llave; las llaves se toman en orden vehicle -> payment -> reservation."""
        ...
