import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from rental_core.application.dtos import CompleteReservationDTO, PaymentOutcomeDTO
from rental_core.application.use_cases import RecordPaymentOutcomeUseCase
from rental_core.domain.entities.payment import PaymentStatus, PaymentType
from rental_core.domain.entities.reservation import InsuranceTier, ReservationStatus
from rental_core.domain.entities.vehicle import VehicleStatus
from rental_core.domain.errors import (
    InvalidAmountError,
    InvalidStateError,
    ReservationNotFoundError,
    ValidationError,
)
from rental_core.domain.value_objects.date_range import start_of_day
from rental_core.infrastructure.in_memory import InMemoryTransactionManager


class DeferredActivationListener:
    """Listener que solo anota las señales; la activación ocurre en otro proceso."""

    def __init__(self):
        self.reservation_ids = []

    async def on_rental_payment_completed(self, reservation_id: int) -> None:
        self.reservation_ids.append(reservation_id)


class TestActivateReservation:
    async def test_reserved_to_active(self, use_cases, vehicle_repo, make_reservation):
        created = await make_reservation()

        reservation = await use_cases.activate_reservation.execute(created.reservation.id)

        assert reservation.status == ReservationStatus.ACTIVE
        assert (await vehicle_repo.get(reservation.vehicle_id)).status == VehicleStatus.RENTED

    async def test_activate_twice_is_rejected(self, use_cases, make_reservation):
        created = await make_reservation()
        await use_cases.activate_reservation.execute(created.reservation.id)

        with pytest.raises(InvalidStateError):
            await use_cases.activate_reservation.execute(created.reservation.id)

    async def test_unknown_reservation(self, use_cases):
        with pytest.raises(ReservationNotFoundError):
            await use_cases.activate_reservation.execute(404)


class TestCompleteReservation:
    async def test_complete_on_time(self, use_cases, clock, vehicle_repo, payment_repo, make_reservation):
        created = await make_reservation(start_in=5, days=3)
        await use_cases.activate_reservation.execute(created.reservation.id)
        clock.set_time(start_of_day(created.reservation.end_date) - timedelta(hours=2))

        result = await use_cases.complete_reservation.execute(
            created.reservation.id, CompleteReservationDTO(final_mileage=1450)
        )

        assert result.reservation.status == ReservationStatus.COMPLETED
        assert result.reservation.actual_return_at == clock.now()
        assert result.overdue_days == 0
        assert result.overdue_penalty == Decimal("0.00")
        assert result.reservation.additional_charges == Decimal("0.00")
        assert result.additional_payment is None

        vehicle = await vehicle_repo.get(created.reservation.vehicle_id)
        assert vehicle.mileage == 1450
        assert vehicle.status == VehicleStatus.AVAILABLE
        assert len(await payment_repo.list_by_reservation(created.reservation.id)) == 1

    async def test_overdue_penalty_is_added_to_manual_charges(self, use_cases, clock, make_reservation):
        created = await make_reservation(start_in=5, days=3)
        await use_cases.activate_reservation.execute(created.reservation.id)
        clock.set_time(start_of_day(created.reservation.end_date) + timedelta(days=2, hours=3))

        result = await use_cases.complete_reservation.execute(
            created.reservation.id,
            CompleteReservationDTO(
                final_mileage=1800,
                additional_charges=Decimal("80.00"),
                additional_charges_description="Tanque vacío",
            ),
        )

        assert result.overdue_days == 3
        assert result.overdue_penalty == Decimal("150.00")
        assert result.total_additional_charges == Decimal("230.00")
        assert result.reservation.additional_charges == Decimal("230.00")
        assert result.reservation.additional_charges_description == (
            "Tanque vacío; Multa por atraso (3 días)"
        )

        payment = result.additional_payment
        assert payment.type == PaymentType.ADDITIONAL
        assert payment.status == PaymentStatus.PENDING
        assert payment.amount == Decimal("230.00")

    async def test_vehicle_stays_rented_with_another_live_reservation(
        self, use_cases, clock, vehicle_repo, make_reservation
    ):
        first = await make_reservation(start_in=5, days=3)
        await make_reservation(start_in=10, days=3)
        await use_cases.activate_reservation.execute(first.reservation.id)
        clock.set_time(start_of_day(first.reservation.end_date))

        await use_cases.complete_reservation.execute(
            first.reservation.id, CompleteReservationDTO(final_mileage=1200)
        )

        assert (await vehicle_repo.get(first.reservation.vehicle_id)).status == VehicleStatus.RENTED

    async def test_complete_on_reserved_is_rejected(self, use_cases, reservation_repo, make_reservation):
        created = await make_reservation()

        with pytest.raises(InvalidStateError):
            await use_cases.complete_reservation.execute(
                created.reservation.id, CompleteReservationDTO(final_mileage=1500)
            )

        stored = await reservation_repo.get(created.reservation.id)
        assert stored.status == ReservationStatus.RESERVED
        assert stored.final_mileage is None

    async def test_final_mileage_below_initial(self, use_cases, make_reservation):
        created = await make_reservation()
        await use_cases.activate_reservation.execute(created.reservation.id)

        with pytest.raises(ValidationError):
            await use_cases.complete_reservation.execute(
                created.reservation.id, CompleteReservationDTO(final_mileage=999)
            )

    async def test_negative_charges(self, use_cases, make_reservation):
        created = await make_reservation()
        await use_cases.activate_reservation.execute(created.reservation.id)

        with pytest.raises(InvalidAmountError):
            await use_cases.complete_reservation.execute(
                created.reservation.id,
                CompleteReservationDTO(final_mileage=1500, additional_charges=Decimal("-1")),
            )


class TestCancelReservation:
    @pytest.mark.parametrize(
        "clock_time, percent, refund, fee",
        [
            # start_date = 2026-03-04 00:00 UTC
            (datetime(2026, 3, 1, 23, 0, tzinfo=timezone.utc), "100", "300.00", "0.00"),
            (datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc), "90", "270.00", "30.00"),
            (datetime(2026, 3, 3, 14, 0, tzinfo=timezone.utc), "70", "210.00", "90.00"),
        ],
        ids=["49h", "36h", "10h"],
    )
    async def test_refund_tiers_on_total_amount(
        self, use_cases, clock, make_reservation, clock_time, percent, refund, fee
    ):
        created = await make_reservation(start_in=3, days=3)
        clock.set_time(clock_time)

        result = await use_cases.cancel_reservation.execute(created.reservation.id, "viaje cancelado")

        assert result.refund_percent == Decimal(percent)
        assert result.refund_amount == Decimal(refund)
        assert result.cancellation_fee == Decimal(fee)
        assert result.reservation.status == ReservationStatus.CANCELLED
        assert (result.reservation.additional_charges or Decimal("0.00")) == Decimal(fee)
        assert result.refund_payment is None

    async def test_pending_rental_payment_is_voided(self, use_cases, clock, payment_repo, make_reservation):
        created = await make_reservation(start_in=3, days=3)
        clock.set_time(datetime(2026, 3, 3, 14, 0, tzinfo=timezone.utc))

        await use_cases.cancel_reservation.execute(created.reservation.id, "enfermedad")

        rental = await payment_repo.get(created.rental_payment.id)
        assert rental.status == PaymentStatus.FAILED
        assert rental.completed_at is None
        assert rental.gateway_response["voided"] == "reservación cancelada"

    async def test_fee_is_charged_with_an_additional_payment(self, use_cases, clock, payment_repo, make_reservation):
        created = await make_reservation(start_in=3, days=3)
        clock.set_time(datetime(2026, 3, 3, 14, 0, tzinfo=timezone.utc))

        result = await use_cases.cancel_reservation.execute(created.reservation.id, "enfermedad")

        fee_payment = result.fee_payment
        assert fee_payment.type == PaymentType.ADDITIONAL
        assert fee_payment.status == PaymentStatus.PENDING
        assert fee_payment.amount == Decimal("90.00")
        assert fee_payment.description == "Cargo por cancelación"
        assert len(await payment_repo.list_by_reservation(created.reservation.id)) == 2

    async def test_no_fee_payment_without_fee(self, use_cases, payment_repo, make_reservation):
        created = await make_reservation(start_in=5, days=3)

        result = await use_cases.cancel_reservation.execute(created.reservation.id, "sin pago")

        assert result.refund_amount == Decimal("300.00")
        assert result.cancellation_fee == Decimal("0.00")
        assert result.fee_payment is None
        assert len(await payment_repo.list_by_reservation(created.reservation.id)) == 1

    async def test_insurance_is_part_of_the_basis(self, use_cases, clock, make_reservation):
        created = await make_reservation(start_in=3, days=3, insurance_tier=InsuranceTier.BASIC)
        clock.set_time(datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc))

        result = await use_cases.cancel_reservation.execute(created.reservation.id, "cambio de fechas")

        assert created.reservation.total_amount == Decimal("345.00")
        assert result.refund_amount == Decimal("310.50")
        assert result.cancellation_fee == Decimal("34.50")

    async def test_voided_payment_cannot_be_captured(
        self, use_cases, clock, reservation_repo, make_reservation
    ):
        created = await make_reservation(start_in=3, days=3)
        clock.set_time(datetime(2026, 3, 3, 14, 0, tzinfo=timezone.utc))
        await use_cases.cancel_reservation.execute(created.reservation.id, "enfermedad")

        with pytest.raises(InvalidStateError):
            await use_cases.record_payment_outcome.execute(
                created.rental_payment.id, PaymentOutcomeDTO(outcome=PaymentStatus.COMPLETED)
            )

        stored = await reservation_repo.get(created.reservation.id)
        assert stored.status == ReservationStatus.CANCELLED
        assert stored.payment_status.value == "pending"

    async def test_completed_rental_payment_gets_a_refund(
        self, use_cases, clock, payment_repo, lock_manager, make_reservation
    ):
        listener = DeferredActivationListener()
        record_outcome = RecordPaymentOutcomeUseCase(
            payment_repo=payment_repo,
            transaction_manager=InMemoryTransactionManager(),
            lock_manager=lock_manager,
            clock=clock,
            rental_payment_listener=listener,
        )
        created = await make_reservation(start_in=3, days=3)
        await record_outcome.execute(
            created.rental_payment.id, PaymentOutcomeDTO(outcome=PaymentStatus.COMPLETED)
        )
        clock.set_time(datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc))

        result = await use_cases.cancel_reservation.execute(created.reservation.id, "viaje cancelado")

        assert listener.reservation_ids == [created.reservation.id]
        assert result.fee_payment is None
        refund_payment = result.refund_payment
        assert refund_payment.type == PaymentType.REFUND
        assert refund_payment.status == PaymentStatus.PENDING
        assert refund_payment.amount == Decimal("270.00")
        assert refund_payment.refunded_payment_id == created.rental_payment.id
        assert (await payment_repo.get(created.rental_payment.id)).status == PaymentStatus.COMPLETED

    async def test_vehicle_is_released(self, use_cases, vehicle_repo, make_reservation):
        created = await make_reservation(start_in=3, days=3)

        result = await use_cases.cancel_reservation.execute(created.reservation.id, "sin pago")

        assert result.reservation.cancellation_reason == "sin pago"
        assert "sin pago" in result.reservation.notes
        assert (await vehicle_repo.get(created.reservation.vehicle_id)).status == VehicleStatus.AVAILABLE

    async def test_locks_are_released_after_many_cycles(self, use_cases, lock_manager, make_reservation):
        for _ in range(20):
            created = await make_reservation(start_in=5, days=3)
            await use_cases.cancel_reservation.execute(created.reservation.id, "prueba de carga")

        assert len(lock_manager) == 0

    async def test_cancel_on_active_is_rejected(self, use_cases, make_reservation):
        created = await make_reservation()
        await use_cases.activate_reservation.execute(created.reservation.id)

        with pytest.raises(InvalidStateError):
            await use_cases.cancel_reservation.execute(created.reservation.id, "tarde")

    async def test_reason_is_required(self, use_cases, make_reservation):
        created = await make_reservation()

        with pytest.raises(ValidationError):
            await use_cases.cancel_reservation.execute(created.reservation.id, "  ")

    async def test_reason_length_is_limited(self, use_cases, make_reservation):
        created = await make_reservation()

        with pytest.raises(ValidationError):
            await use_cases.cancel_reservation.execute(created.reservation.id, "x" * 501)


class TestRentalPaymentListener:
    async def test_completed_rental_payment_activates_reservation(
        self, use_cases, reservation_repo, paid_reservation
    ):
        created = await paid_reservation()

        stored = await reservation_repo.get(created.reservation.id)
        assert stored.status == ReservationStatus.ACTIVE
        assert stored.payment_status.value == "paid"

    async def test_active_reservation_is_only_marked_paid(
        self, use_cases, reservation_repo, make_reservation, caplog
    ):
        created = await make_reservation()
        await use_cases.activate_reservation.execute(created.reservation.id)

        with caplog.at_level(logging.WARNING):
            payment = await use_cases.record_payment_outcome.execute(
                created.rental_payment.id, PaymentOutcomeDTO(outcome=PaymentStatus.COMPLETED)
            )

        assert payment.status == PaymentStatus.COMPLETED
        stored = await reservation_repo.get(created.reservation.id)
        assert stored.status == ReservationStatus.ACTIVE
        assert stored.payment_status.value == "paid"
        assert "Rental payment completed for a reservation that is not reserved" in caplog.text
