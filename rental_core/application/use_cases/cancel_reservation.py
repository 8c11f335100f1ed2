import logging
from datetime import datetime
from decimal import Decimal

from rental_core.application.dtos.reservation_dto import CancellationResultDTO
from rental_core.application.interfaces.clock import Clock
from rental_core.application.interfaces.lock_manager import (
    LockManager,
    payment_lock,
    reservation_lock,
    vehicle_lock,
)
from rental_core.application.interfaces.payment_repo import PaymentRepo
from rental_core.application.interfaces.reservation_repo import ReservationRepo
from rental_core.application.interfaces.transaction_manager import TransactionManager
from rental_core.application.interfaces.uuid_generator import UUIDGenerator
from rental_core.application.interfaces.vehicle_repo import VehicleRepo
from rental_core.application.use_cases.vehicle_projection import refresh_vehicle_status
from rental_core.domain.entities.payment import Payment, PaymentStatus, PaymentType
from rental_core.domain.entities.reservation import Reservation, ReservationStatus
from rental_core.domain.errors import (
    ReservationNotFoundError,
    ValidationError,
    VehicleNotFoundError,
)
from rental_core.domain.services.refunds import cancellation_refund, refundable_remaining
from rental_core.domain.value_objects.money import quantize

MAX_REASON_LENGTH = 500


class CancelReservationUseCase:
    """
    reserved -> cancelled.

    El reembolso y la tasa se calculan sobre el total_amount de la
    reservación según las horas que faltan para las 00:00 UTC del
    start_date. La tasa se suma a los cargos adicionales.

    Según el pago de locación:
    - pendiente: se anula (queda `failed`) y la tasa se cobra con un pago
      adicional pendiente.
    - completado: se emite un reembolso pendiente por el monto calculado,
      acotado a lo que aún resta reembolsar.
    """

    def __init__(
        self,
        vehicle_repo: VehicleRepo,
        reservation_repo: ReservationRepo,
        payment_repo: PaymentRepo,
        transaction_manager: TransactionManager,
        lock_manager: LockManager,
        clock: Clock,
        uuid_generator: UUIDGenerator,
    ) -> None:
        self._vehicle_repo = vehicle_repo
        self._reservation_repo = reservation_repo
        self._payment_repo = payment_repo
        self._transaction_manager = transaction_manager
        self._lock_manager = lock_manager
        self._clock = clock
        self._uuid_generator = uuid_generator
        self._logger = logging.getLogger(__name__)

    async def execute(self, reservation_id: int, reason: str) -> CancellationResultDTO:
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("reason", "es obligatorio")
        if len(reason) > MAX_REASON_LENGTH:
            raise ValidationError("reason", f"máximo {MAX_REASON_LENGTH} caracteres")

        current = await self._reservation_repo.get(reservation_id)
        if current is None:
            raise ReservationNotFoundError(reservation_id)

        keys = [vehicle_lock(current.vehicle_id), reservation_lock(reservation_id)]
        # El pago de locación se bloquea para no competir con su liquidación
        current_rental = await self._rental_payment(reservation_id)
        if current_rental is not None:
            keys.append(payment_lock(current_rental.id))

        async with self._lock_manager.acquire(*keys):
            async with self._transaction_manager.start():
                now = self._clock.now()
                reservation = await self._reservation_repo.get(reservation_id)
                reservation.ensure_transition(ReservationStatus.CANCELLED, "cancelar")

                vehicle = await self._vehicle_repo.get_for_update(reservation.vehicle_id)
                if vehicle is None:
                    raise VehicleNotFoundError(reservation.vehicle_id)

                refund = cancellation_refund(
                    quantize(reservation.total_amount), reservation.hours_until_start(now)
                )

                reservation_version = reservation.lock_version
                vehicle_version = vehicle.lock_version

                reservation.cancel(now=now, reason=reason, fee=refund.fee)
                reservation = await self._reservation_repo.update(reservation, reservation_version)
                await refresh_vehicle_status(
                    vehicle, vehicle_version, self._vehicle_repo, self._reservation_repo, now
                )

                refund_payment = None
                fee_payment = None
                rental = await self._rental_payment(reservation.id)
                if rental is not None and rental.status == PaymentStatus.COMPLETED:
                    refund_payment = await self._issue_refund(
                        reservation, rental, refund.refund_amount, reason, now
                    )
                else:
                    if rental is not None and rental.is_pending:
                        await self._void(rental, now)
                    if refund.fee > Decimal("0"):
                        fee_payment = await self._payment_repo.add(
                            Payment.create_pending(
                                reservation_id=reservation.id,
                                amount=refund.fee,
                                payment_type=PaymentType.ADDITIONAL,
                                description="Cargo por cancelación",
                                now=now,
                                currency_code=reservation.currency_code,
                                transaction_id=self._uuid_generator.generate_transaction_id(),
                            )
                        )

        self._logger.info(
            "Reservation cancelled",
            extra={
                "reservation_id": reservation.id,
                "vehicle_id": reservation.vehicle_id,
                "reason": reason,
                "hours_until_start": str(refund.hours_until_start),
                "refund_amount": str(refund.refund_amount),
                "cancellation_fee": str(refund.fee),
                "refund_payment_id": refund_payment.id if refund_payment else None,
                "fee_payment_id": fee_payment.id if fee_payment else None,
            },
        )
        return CancellationResultDTO(
            reservation=reservation,
            hours_until_start=refund.hours_until_start,
            refund_percent=refund.refund_percent,
            refund_amount=refund.refund_amount,
            cancellation_fee=refund.fee,
            refund_payment=refund_payment,
            fee_payment=fee_payment,
        )

    async def _rental_payment(self, reservation_id: int) -> Payment | None:
        payments = await self._payment_repo.list_by_reservation(reservation_id)
        return next((p for p in payments if p.type == PaymentType.RENTAL), None)

    async def _void(self, rental: Payment, now: datetime) -> None:
        """Un cobro pendiente de una reservación cancelada ya no puede liquidarse."""
        expected_lock_version = rental.lock_version
        rental.attach_settlement(None, {"voided": "reservación cancelada"}, now)
        rental.fail(now)
        await self._payment_repo.update(rental, expected_lock_version)

    async def _issue_refund(
        self,
        reservation: Reservation,
        rental: Payment,
        amount: Decimal,
        reason: str,
        now: datetime,
    ) -> Payment | None:
        refunds = await self._payment_repo.list_refunds_for(rental.id)
        amount = min(amount, refundable_remaining(rental, refunds))
        if amount <= Decimal("0"):
            return None
        pending_refund = Payment.create_pending(
            reservation_id=reservation.id,
            amount=amount,
            payment_type=PaymentType.REFUND,
            description=f"Reembolso por cancelación - {reason}",
            now=now,
            currency_code=reservation.currency_code,
            transaction_id=self._uuid_generator.generate_transaction_id(),
        )
        pending_refund.refunded_payment_id = rental.id
        pending_refund.method = rental.method
        return await self._payment_repo.add(pending_refund)
