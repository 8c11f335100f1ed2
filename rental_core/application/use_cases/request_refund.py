import logging
from decimal import Decimal

from rental_core.application.dtos.payment_dto import RefundResultDTO
from rental_core.application.interfaces.clock import Clock
from rental_core.application.interfaces.lock_manager import (
    LockManager,
    payment_lock,
    reservation_lock,
)
from rental_core.application.interfaces.payment_repo import PaymentRepo
from rental_core.application.interfaces.reservation_repo import ReservationRepo
from rental_core.application.interfaces.settlement_gateway import SettlementGatewayProvider
from rental_core.application.interfaces.transaction_manager import TransactionManager
from rental_core.application.interfaces.uuid_generator import UUIDGenerator
from rental_core.domain.entities.payment import Payment, PaymentStatus, PaymentType
from rental_core.domain.entities.reservation import ReservationPaymentStatus
from rental_core.domain.errors import (
    InvalidAmountError,
    NotRefundableError,
    PaymentNotFoundError,
    ReservationNotFoundError,
    ValidationError,
)
from rental_core.domain.services.refunds import refund_ineligibility_reason, refundable_remaining
from rental_core.domain.value_objects.money import quantize


class RequestRefundUseCase:
    def __init__(
        self,
        payment_repo: PaymentRepo,
        reservation_repo: ReservationRepo,
        transaction_manager: TransactionManager,
        lock_manager: LockManager,
        clock: Clock,
        uuid_generator: UUIDGenerator,
        gateway_provider: SettlementGatewayProvider,
    ) -> None:
        self._payment_repo = payment_repo
        self._reservation_repo = reservation_repo
        self._transaction_manager = transaction_manager
        self._lock_manager = lock_manager
        self._clock = clock
        self._uuid_generator = uuid_generator
        self._gateway_provider = gateway_provider
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        payment_id: int,
        reason: str,
        amount: Decimal | None = None,
    ) -> RefundResultDTO:
        """
        Reembolsa total o parcialmente un pago completado.

        El monto por defecto es lo que resta reembolsar del original. La suma
        de reembolsos no fallidos nunca supera el monto original.

        Raises:
            PaymentNotFoundError: si el pago no existe.
            NotRefundableError: si el pago no es elegible.
            InvalidAmountError: si el monto es <= 0 o supera lo reembolsable.
        """
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("reason", "es obligatorio")

        current = await self._payment_repo.get(payment_id)
        if current is None:
            raise PaymentNotFoundError(payment_id)

        async with self._lock_manager.acquire(
            payment_lock(payment_id), reservation_lock(current.reservation_id)
        ):
            async with self._transaction_manager.start():
                now = self._clock.now()
                payment = await self._payment_repo.get(payment_id)

                ineligible = refund_ineligibility_reason(payment, now)
                if ineligible:
                    raise NotRefundableError(payment_id, ineligible)

                previous_refunds = await self._payment_repo.list_refunds_for(payment.id)
                remaining = refundable_remaining(payment, previous_refunds)
                if remaining <= Decimal("0"):
                    raise NotRefundableError(payment_id, "no queda monto por reembolsar")

                refund_amount = remaining if amount is None else quantize(amount)
                if refund_amount <= Decimal("0") or refund_amount > remaining:
                    raise InvalidAmountError(
                        f"El monto a reembolsar debe estar entre 0.01 y {remaining}: {refund_amount}"
                    )

                reservation = None
                if payment.type == PaymentType.RENTAL:
                    reservation = await self._reservation_repo.get(payment.reservation_id)
                    if reservation is None:
                        raise ReservationNotFoundError(payment.reservation_id)

                gateway = self._gateway_provider.for_method(payment.method)
                settlement = await gateway.refund(payment, refund_amount, reason)

                refund = Payment.create_pending(
                    reservation_id=payment.reservation_id,
                    amount=refund_amount,
                    payment_type=PaymentType.REFUND,
                    description=f"Reembolso - {reason}",
                    now=now,
                    currency_code=payment.currency_code,
                    transaction_id=self._uuid_generator.generate_transaction_id(),
                )
                refund.refunded_payment_id = payment.id
                refund.method = payment.method
                refund.attach_settlement(settlement.reference, settlement.metadata, now)
                if settlement.status == PaymentStatus.COMPLETED:
                    refund.complete(now)
                elif settlement.status == PaymentStatus.FAILED:
                    refund.fail(now)
                refund = await self._payment_repo.add(refund)

                if refund.status != PaymentStatus.FAILED:
                    remaining = quantize(remaining - refund_amount)
                refunded_total = quantize(payment.amount - remaining)

                if refund.status != PaymentStatus.FAILED:
                    full = remaining == Decimal("0")
                    if full:
                        payment_version = payment.lock_version
                        payment.mark_refunded(now)
                        payment = await self._payment_repo.update(payment, payment_version)

                    if reservation is not None:
                        reservation_version = reservation.lock_version
                        reservation.set_payment_status(
                            ReservationPaymentStatus.REFUNDED
                            if full
                            else ReservationPaymentStatus.PARTIAL,
                            now,
                        )
                        if reservation.lock_version != reservation_version:
                            await self._reservation_repo.update(reservation, reservation_version)

        log = self._logger.warning if refund.status == PaymentStatus.FAILED else self._logger.info
        log(
            "Refund requested",
            extra={
                "payment_id": payment.id,
                "refund_payment_id": refund.id,
                "reservation_id": payment.reservation_id,
                "amount": str(refund_amount),
                "refund_status": refund.status.value,
                "remaining_refundable": str(remaining),
            },
        )
        return RefundResultDTO(
            original_payment=payment,
            refund_payment=refund,
            refunded_total=refunded_total,
            remaining_refundable=remaining,
        )
