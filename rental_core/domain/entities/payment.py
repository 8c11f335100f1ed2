"""Entidad Payment - un evento monetario de una reservación."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from rental_core.domain.errors import InvalidStateError
from rental_core.domain.value_objects.money import Money


class PaymentStatus(str, Enum):
    """Estados posibles de un pago."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentType(str, Enum):
    RENTAL = "rental"
    DEPOSIT = "deposit"
    ADDITIONAL = "additional"
    REFUND = "refund"


class PaymentMethod(str, Enum):
    """Métodos de liquidación soportados."""

    PIX = "pix"
    BOLETO = "boleto"
    CREDIT_CARD = "credit_card"


# Única tabla de transiciones de la máquina de estados del pago.
# COMPLETED no es terminal: puede pasar a REFUNDED.
PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.COMPLETED, PaymentStatus.FAILED}),
    PaymentStatus.COMPLETED: frozenset({PaymentStatus.REFUNDED}),
    PaymentStatus.FAILED: frozenset(),
    PaymentStatus.REFUNDED: frozenset(),
}


@dataclass
class Payment:
    """
    Entidad que representa un pago asociado a una reservación.

    Los metadatos del proveedor de liquidación (`gateway_reference`,
    `gateway_response`) se guardan tal cual y nunca se interpretan.
    """

    # Identificadores
    id: int | None = None
    reservation_id: int = 0
    transaction_id: str | None = None

    # Monto
    amount: Decimal = Decimal("0")
    currency_code: str = "BRL"

    # Clasificación
    type: PaymentType = PaymentType.RENTAL
    method: PaymentMethod | None = None
    description: str | None = None
    refunded_payment_id: int | None = None

    # Estado
    status: PaymentStatus = PaymentStatus.PENDING

    # Proveedor de liquidación
    gateway_reference: str | None = None
    gateway_response: dict[str, Any] = field(default_factory=dict)

    # Control de concurrencia
    lock_version: int = 0

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None
    refunded_at: datetime | None = None

    # === Propiedades ===

    @property
    def money(self) -> Money:
        """Retorna el monto como Value Object Money."""
        return Money(amount=self.amount, currency_code=self.currency_code)

    @property
    def is_pending(self) -> bool:
        return self.status == PaymentStatus.PENDING

    @property
    def is_completed(self) -> bool:
        return self.status == PaymentStatus.COMPLETED

    @property
    def is_final(self) -> bool:
        """Verifica si el pago está en un estado terminal."""
        return not PAYMENT_TRANSITIONS[self.status]

    # === Máquina de estados ===

    def transition_to(self, target: PaymentStatus, operation: str, now: datetime) -> None:
        if target not in PAYMENT_TRANSITIONS[self.status]:
            expected = [
                source.value for source, targets in PAYMENT_TRANSITIONS.items() if target in targets
            ]
            raise InvalidStateError(
                entity=f"el pago {self.id}",
                current_status=self.status.value,
                expected_status=expected,
                operation=operation,
            )
        self.status = target
        self.updated_at = now
        self.lock_version += 1
        if target == PaymentStatus.COMPLETED:
            self.completed_at = now
        elif target == PaymentStatus.REFUNDED:
            self.refunded_at = now

    def complete(self, now: datetime) -> None:
        self.transition_to(PaymentStatus.COMPLETED, "completar", now)

    def fail(self, now: datetime) -> None:
        self.transition_to(PaymentStatus.FAILED, "marcar como fallido", now)

    def mark_refunded(self, now: datetime) -> None:
        self.transition_to(PaymentStatus.REFUNDED, "reembolsar", now)

    def choose_method(self, method: PaymentMethod, now: datetime) -> None:
        if self.method == method:
            return
        self.method = method
        self.updated_at = now
        self.lock_version += 1

    def attach_settlement(
        self,
        reference: str | None,
        metadata: dict[str, Any] | None,
        now: datetime,
    ) -> None:
        """Guarda la referencia y los metadatos opacos del proveedor."""
        if reference:
            self.gateway_reference = reference
        if metadata:
            self.gateway_response = {**self.gateway_response, **metadata}
        self.updated_at = now
        self.lock_version += 1

    # === Factories ===

    @classmethod
    def create_pending(
        cls,
        reservation_id: int,
        amount: Decimal,
        payment_type: PaymentType,
        description: str,
        now: datetime,
        currency_code: str = "BRL",
        transaction_id: str | None = None,
    ) -> "Payment":
        """Factory para crear un pago pendiente."""
        return cls(
            reservation_id=reservation_id,
            transaction_id=transaction_id,
            amount=amount,
            currency_code=currency_code,
            type=payment_type,
            description=description,
            status=PaymentStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
