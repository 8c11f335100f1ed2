from datetime import timedelta
from typing import Any

from rental_core.application.interfaces.clock import Clock
from rental_core.application.interfaces.settlement_gateway import SettlementResult
from rental_core.application.interfaces.uuid_generator import UUIDGenerator
from rental_core.domain.entities.payment import Payment, PaymentMethod, PaymentStatus
from rental_core.infrastructure.gateways.base import DeterministicSettlementGateway

QR_CODE_EXPIRATION = timedelta(minutes=30)


class PixSettlementGateway(DeterministicSettlementGateway):
    """Genera el código PIX; la confirmación llega después como señal externa."""

    method_name = PaymentMethod.PIX.value

    def __init__(self, clock: Clock, uuid_generator: UUIDGenerator, pix_key: str) -> None:
        super().__init__(clock, uuid_generator)
        self._pix_key = pix_key

    async def settle(self, payment: Payment, details: dict[str, Any]) -> SettlementResult:
        qr_code = self._uuid_generator.generate_reference("PIX")
        return SettlementResult(
            status=PaymentStatus.PENDING,
            reference=qr_code,
            metadata={
                "method": self.method_name,
                "qr_code": qr_code,
                "pix_key": self._pix_key,
                "expires_at": (self._clock.now() + QR_CODE_EXPIRATION).isoformat(),
            },
        )
