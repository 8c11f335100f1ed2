from decimal import Decimal

from rental_core.application.interfaces.clock import Clock
from rental_core.application.interfaces.settlement_gateway import (
    SettlementGateway,
    SettlementResult,
)
from rental_core.application.interfaces.uuid_generator import UUIDGenerator
from rental_core.domain.entities.payment import Payment, PaymentStatus


class DeterministicSettlementGateway(SettlementGateway):
    """
    Base de los adaptadores locales: los reembolsos responden con el estado
    configurado y una referencia REF generada.
    """

    method_name = ""

    def __init__(
        self,
        clock: Clock,
        uuid_generator: UUIDGenerator,
        refund_outcome: PaymentStatus = PaymentStatus.COMPLETED,
    ) -> None:
        self._clock = clock
        self._uuid_generator = uuid_generator
        self._refund_outcome = refund_outcome

    async def refund(self, payment: Payment, amount: Decimal, reason: str) -> SettlementResult:
        reference = self._uuid_generator.generate_reference("REF", length=10)
        return SettlementResult(
            status=self._refund_outcome,
            reference=reference,
            metadata={
                "refund_id": reference,
                "method": self.method_name,
                "amount": str(amount),
                "reason": reason,
                "processed_at": self._clock.now().isoformat(),
            },
        )
