from datetime import date, timedelta
from typing import Any

from rental_core.application.interfaces.clock import Clock
from rental_core.application.interfaces.settlement_gateway import SettlementResult
from rental_core.application.interfaces.uuid_generator import UUIDGenerator
from rental_core.domain.entities.payment import Payment, PaymentMethod, PaymentStatus
from rental_core.domain.errors import ValidationError
from rental_core.infrastructure.gateways.base import DeterministicSettlementGateway


class BoletoSettlementGateway(DeterministicSettlementGateway):
    """Emite el boleto; queda pendiente hasta la compensación bancaria."""

    method_name = PaymentMethod.BOLETO.value

    def __init__(self, clock: Clock, uuid_generator: UUIDGenerator, due_days: int = 3) -> None:
        super().__init__(clock, uuid_generator)
        self._due_days = due_days

    def _due_date(self, details: dict[str, Any]) -> date:
        today = self._clock.today()
        raw = details.get("due_date")
        if raw is None:
            return today + timedelta(days=self._due_days)
        due = raw if isinstance(raw, date) else date.fromisoformat(str(raw))
        if due < today:
            raise ValidationError("due_date", "no puede ser anterior a hoy")
        return due

    async def settle(self, payment: Payment, details: dict[str, Any]) -> SettlementResult:
        due_date = self._due_date(details)
        barcode = self._uuid_generator.generate_reference("23793", length=20)
        return SettlementResult(
            status=PaymentStatus.PENDING,
            reference=barcode,
            metadata={
                "method": self.method_name,
                "barcode": barcode,
                "due_date": due_date.isoformat(),
            },
        )
