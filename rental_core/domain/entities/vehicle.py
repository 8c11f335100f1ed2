"""Entidad Vehicle - unidad alquilable de la flota."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from rental_core.domain.value_objects.money import Money


class VehicleStatus(str, Enum):
    """Estado cacheado del vehículo."""

    AVAILABLE = "available"
    RENTED = "rented"
    MAINTENANCE = "maintenance"
    INACTIVE = "inactive"


@dataclass
class Vehicle:
    """
    Vehículo de la flota.

    `status` es una proyección: la fuente de verdad de la ocupación son las
    reservaciones vivas del vehículo, nunca este campo.
    """

    id: int | None = None
    plate: str = ""
    brand: str = ""
    model: str = ""
    daily_rate: Decimal = Decimal("0")
    currency_code: str = "BRL"
    mileage: int = 0
    status: VehicleStatus = VehicleStatus.AVAILABLE

    lock_version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def rate(self) -> Money:
        return Money(amount=self.daily_rate, currency_code=self.currency_code)

    @property
    def is_rentable(self) -> bool:
        """Mantenimiento e inactivo bloquean nuevas reservaciones."""
        return self.status in (VehicleStatus.AVAILABLE, VehicleStatus.RENTED)

    def project_status(self, has_live_reservations: bool) -> VehicleStatus:
        """
        Recalcula el estado cacheado a partir de las reservaciones vivas.

        Mantenimiento e inactivo son decisiones operativas y se conservan.
        """
        if not self.is_rentable:
            return self.status
        if has_live_reservations:
            return VehicleStatus.RENTED
        return VehicleStatus.AVAILABLE

    def set_status(self, status: VehicleStatus, now: datetime) -> bool:
        """Retorna True si el estado cambió."""
        if self.status == status:
            return False
        self.status = status
        self.updated_at = now
        self.lock_version += 1
        return True

    def record_mileage(self, mileage: int, now: datetime) -> None:
        if self.mileage == mileage:
            return
        self.mileage = mileage
        self.updated_at = now
        self.lock_version += 1
