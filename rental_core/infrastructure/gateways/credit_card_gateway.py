import re
from typing import Any

from rental_core.application.interfaces.clock import Clock
from rental_core.application.interfaces.settlement_gateway import SettlementResult
from rental_core.application.interfaces.uuid_generator import UUIDGenerator
from rental_core.domain.entities.payment import Payment, PaymentMethod, PaymentStatus
from rental_core.domain.errors import ValidationError
from rental_core.infrastructure.gateways.base import DeterministicSettlementGateway

CARD_BRANDS = (
    (re.compile(r"^4"), "visa"),
    (re.compile(r"^5[1-5]"), "mastercard"),
    (re.compile(r"^3[47]"), "amex"),
    (re.compile(r"^(6011|65)"), "discover"),
)


def card_brand(card_number: str) -> str:
    for pattern, brand in CARD_BRANDS:
        if pattern.match(card_number):
            return brand
    return "unknown"


class CreditCardSettlementGateway(DeterministicSettlementGateway):
    """
    Autorización de tarjeta con resultado configurado.

    Solo se devuelven marca y últimos cuatro dígitos; número y CVV nunca
    llegan a los metadatos.
    """

    method_name = PaymentMethod.CREDIT_CARD.value

    def __init__(
        self,
        clock: Clock,
        uuid_generator: UUIDGenerator,
        outcome: PaymentStatus = PaymentStatus.COMPLETED,
    ) -> None:
        super().__init__(clock, uuid_generator)
        self._outcome = outcome

    async def settle(self, payment: Payment, details: dict[str, Any]) -> SettlementResult:
        card_number = re.sub(r"\D", "", str(details.get("card_number", "")))
        if len(card_number) < 13:
            raise ValidationError("card_number", "número de tarjeta inválido")

        metadata: dict[str, Any] = {
            "method": self.method_name,
            "card_brand": card_brand(card_number),
            "last_four_digits": card_number[-4:],
            "installments": int(details.get("installments", 1)),
        }
        if self._outcome == PaymentStatus.FAILED:
            metadata.update(error_code="51", error_message="Transacción rechazada por el emisor")
            return SettlementResult(status=PaymentStatus.FAILED, metadata=metadata)

        authorization = self._uuid_generator.generate_reference("AUTH", length=6)
        metadata["authorization_code"] = authorization
        return SettlementResult(status=self._outcome, reference=authorization, metadata=metadata)
