from decimal import Decimal
from typing import Any

from rental_core.application.interfaces.settlement_gateway import (
    SettlementGateway,
    SettlementResult,
)
from rental_core.domain.entities.payment import Payment, PaymentStatus


class StubSettlementGateway(SettlementGateway):
    """Gateway con resultados fijos que registra cada llamada."""

    def __init__(
        self,
        settle_status: PaymentStatus = PaymentStatus.PENDING,
        refund_status: PaymentStatus = PaymentStatus.COMPLETED,
    ) -> None:
        self.settle_status = settle_status
        self.refund_status = refund_status
        self.settled: list[tuple[int, dict[str, Any]]] = []
        self.refunded: list[tuple[int, Decimal, str]] = []

    async def settle(self, payment: Payment, details: dict[str, Any]) -> SettlementResult:
        self.settled.append((payment.id, details))
        return SettlementResult(
            status=self.settle_status,
            reference=f"STUB-{payment.id}",
            metadata={"stub": True},
        )

    async def refund(self, payment: Payment, amount: Decimal, reason: str) -> SettlementResult:
        self.refunded.append((payment.id, amount, reason))
        return SettlementResult(
            status=self.refund_status,
            reference=f"STUB-REF-{payment.id}-{len(self.refunded)}",
            metadata={"amount": str(amount)},
        )
