from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol

from rental_core.domain.entities.payment import Payment, PaymentMethod, PaymentStatus


@dataclass
class SettlementResult:
    """Resultado opaco de un proveedor de liquidación."""

    status: PaymentStatus
    reference: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class SettlementGateway:
    async def settle(self, payment: Payment, details: dict[str, Any]) -> SettlementResult:
        raise NotImplementedError

    async def refund(self, payment: Payment, amount: Decimal, reason: str) -> SettlementResult:
        raise NotImplementedError


class SettlementGatewayProvider(Protocol):
    def for_method(self, method: PaymentMethod | None) -> SettlementGateway: ...
