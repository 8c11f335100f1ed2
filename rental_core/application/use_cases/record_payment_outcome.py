import logging

from rental_core.application.dtos.payment_dto import PaymentOutcomeDTO
from rental_core.application.interfaces.clock import Clock
from rental_core.application.interfaces.lock_manager import LockManager, payment_lock
from rental_core.application.interfaces.payment_repo import PaymentRepo
from rental_core.application.interfaces.rental_payment_listener import RentalPaymentListener
from rental_core.application.interfaces.transaction_manager import TransactionManager
from rental_core.domain.entities.payment import Payment, PaymentStatus, PaymentType
from rental_core.domain.errors import InvalidStateError, PaymentNotFoundError, ValidationError

ACCEPTED_OUTCOMES = (PaymentStatus.COMPLETED, PaymentStatus.PENDING, PaymentStatus.FAILED)


class RecordPaymentOutcomeUseCase:
    """
    Aplica la señal de un proveedor de liquidación a un pago pendiente.

    - completed: registra completed_at; si es el pago de locación, notifica
      al listener para activar la reservación.
    - failed: el pago queda fallido.
    - pending: solo guarda los metadatos recibidos.
    """

    def __init__(
        self,
        payment_repo: PaymentRepo,
        transaction_manager: TransactionManager,
        lock_manager: LockManager,
        clock: Clock,
        rental_payment_listener: RentalPaymentListener,
    ) -> None:
        self._payment_repo = payment_repo
        self._transaction_manager = transaction_manager
        self._lock_manager = lock_manager
        self._clock = clock
        self._listener = rental_payment_listener
        self._logger = logging.getLogger(__name__)

    async def execute(self, payment_id: int, outcome: PaymentOutcomeDTO) -> Payment:
        async with self._lock_manager.acquire(payment_lock(payment_id)):
            async with self._transaction_manager.start():
                payment = await self._payment_repo.get(payment_id)
                if payment is None:
                    raise PaymentNotFoundError(payment_id)
                return await self.apply(payment, outcome)

    async def apply(self, payment: Payment, outcome: PaymentOutcomeDTO) -> Payment:
        """Requiere el lock del pago y una transacción abiertos por quien llama."""
        if outcome.outcome not in ACCEPTED_OUTCOMES:
            raise ValidationError(
                "outcome", f"debe ser uno de {[o.value for o in ACCEPTED_OUTCOMES]}"
            )
        if not payment.is_pending:
            raise InvalidStateError(
                entity=f"el pago {payment.id}",
                current_status=payment.status.value,
                expected_status=PaymentStatus.PENDING.value,
                operation="registrar el resultado de",
            )

        now = self._clock.now()
        expected_lock_version = payment.lock_version
        if outcome.reference or outcome.metadata:
            payment.attach_settlement(outcome.reference, outcome.metadata, now)
        if outcome.outcome == PaymentStatus.COMPLETED:
            payment.complete(now)
        elif outcome.outcome == PaymentStatus.FAILED:
            payment.fail(now)

        if payment.lock_version != expected_lock_version:
            payment = await self._payment_repo.update(payment, expected_lock_version)

        if payment.status == PaymentStatus.FAILED:
            self._logger.warning(
                "Payment failed",
                extra={
                    "payment_id": payment.id,
                    "reservation_id": payment.reservation_id,
                    "type": payment.type.value,
                },
            )
        elif payment.status == PaymentStatus.COMPLETED:
            self._logger.info(
                "Payment completed",
                extra={
                    "payment_id": payment.id,
                    "reservation_id": payment.reservation_id,
                    "type": payment.type.value,
                    "amount": str(payment.amount),
                },
            )
            if payment.type == PaymentType.RENTAL:
                await self._listener.on_rental_payment_completed(payment.reservation_id)

        return payment
