from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from rental_core.domain.entities.payment import Payment, PaymentStatus, PaymentType
from rental_core.domain.entities.reservation import Reservation, ReservationStatus
from rental_core.domain.entities.vehicle import Vehicle, VehicleStatus
from rental_core.domain.errors import InvalidRangeError, InvalidStateError
from rental_core.domain.value_objects.date_range import DateRange

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def reservation(status: ReservationStatus = ReservationStatus.RESERVED) -> Reservation:
    return Reservation(
        id=1,
        vehicle_id=1,
        start_date=date(2026, 3, 10),
        end_date=date(2026, 3, 12),
        status=status,
    )


class TestReservationStateMachine:
    def test_reserved_to_active(self):
        r = reservation()
        r.activate(NOW)

        assert r.status == ReservationStatus.ACTIVE
        assert r.lock_version == 1

    def test_active_to_completed_records_return(self):
        r = reservation(ReservationStatus.ACTIVE)
        r.complete(NOW, final_mileage=1500, additional_charges=Decimal("0"))

        assert r.status == ReservationStatus.COMPLETED
        assert r.actual_return_at == NOW
        assert r.final_mileage == 1500
        assert r.additional_charges == Decimal("0.00")

    @pytest.mark.parametrize(
        "status",
        [ReservationStatus.ACTIVE, ReservationStatus.COMPLETED, ReservationStatus.CANCELLED],
    )
    def test_only_reserved_can_be_cancelled(self, status):
        r = reservation(status)

        with pytest.raises(InvalidStateError):
            r.cancel(NOW, reason="cambio de planes", fee=Decimal("0"))
        assert r.status == status
        assert r.lock_version == 0

    def test_reserved_cannot_complete(self):
        with pytest.raises(InvalidStateError) as exc_info:
            reservation().complete(NOW, final_mileage=10, additional_charges=Decimal("0"))

        assert exc_info.value.expected_status == ["active"]

    def test_terminal_states(self):
        assert reservation(ReservationStatus.COMPLETED).is_terminal
        assert reservation(ReservationStatus.CANCELLED).is_terminal
        assert not reservation().is_terminal

    def test_cancel_fee_is_added_to_existing_charges(self):
        r = reservation()
        r.add_charges(Decimal("20.00"), "Lavado")
        r.cancel(NOW, reason="viaje suspendido", fee=Decimal("63.00"))

        assert r.additional_charges == Decimal("83.00")
        assert r.additional_charges_description == "Lavado; Cargo por cancelación"
        assert r.cancellation_reason == "viaje suspendido"
        assert "viaje suspendido" in r.notes

    def test_overdue_only_while_active(self):
        late = datetime(2026, 3, 12, 0, 0, 1, tzinfo=timezone.utc)

        assert reservation(ReservationStatus.ACTIVE).is_overdue(late)
        assert not reservation(ReservationStatus.RESERVED).is_overdue(late)

    def test_return_during_last_booked_day_is_overdue(self):
        active = reservation(ReservationStatus.ACTIVE)

        assert not active.is_overdue(datetime(2026, 3, 12, tzinfo=timezone.utc))
        assert active.is_overdue(datetime(2026, 3, 12, 12, 0, tzinfo=timezone.utc))

    def test_hours_until_start_counts_from_midnight_utc(self):
        assert reservation().hours_until_start(NOW) == Decimal("204")


class TestPaymentStateMachine:
    def test_pending_to_completed(self):
        payment = Payment(id=1, type=PaymentType.RENTAL)
        payment.complete(NOW)

        assert payment.status == PaymentStatus.COMPLETED
        assert payment.completed_at == NOW

    def test_completed_to_refunded(self):
        payment = Payment(id=1, status=PaymentStatus.COMPLETED)
        payment.mark_refunded(NOW)

        assert payment.status == PaymentStatus.REFUNDED
        assert payment.refunded_at == NOW

    @pytest.mark.parametrize("status", [PaymentStatus.FAILED, PaymentStatus.REFUNDED])
    def test_final_states_reject_transitions(self, status):
        payment = Payment(id=1, status=status)

        assert payment.is_final
        with pytest.raises(InvalidStateError):
            payment.complete(NOW)

    def test_pending_cannot_be_refunded(self):
        with pytest.raises(InvalidStateError):
            Payment(id=1).mark_refunded(NOW)

    def test_settlement_metadata_is_merged(self):
        payment = Payment(id=1, gateway_response={"qr_code": "PIX1"})
        payment.attach_settlement("E2E-1", {"end_to_end_id": "E2E-1"}, NOW)

        assert payment.gateway_reference == "E2E-1"
        assert payment.gateway_response == {"qr_code": "PIX1", "end_to_end_id": "E2E-1"}


class TestVehicleProjection:
    def test_live_reservations_mark_vehicle_rented(self):
        assert Vehicle(status=VehicleStatus.AVAILABLE).project_status(True) == VehicleStatus.RENTED

    def test_no_live_reservations_release_vehicle(self):
        assert Vehicle(status=VehicleStatus.RENTED).project_status(False) == VehicleStatus.AVAILABLE

    @pytest.mark.parametrize("status", [VehicleStatus.MAINTENANCE, VehicleStatus.INACTIVE])
    def test_operational_statuses_are_kept(self, status):
        assert Vehicle(status=status).project_status(True) == status
        assert not Vehicle(status=status).is_rentable


class TestDateRange:
    def test_days_are_inclusive(self):
        assert DateRange(date(2026, 3, 10), date(2026, 3, 12)).days == 3

    def test_shared_boundary_day_overlaps(self):
        first = DateRange(date(2026, 3, 10), date(2026, 3, 12))
        second = DateRange(date(2026, 3, 12), date(2026, 3, 15))

        assert first.overlaps_with(second)
        assert second.overlaps_with(first)

    def test_adjacent_ranges_do_not_overlap(self):
        first = DateRange(date(2026, 3, 10), date(2026, 3, 12))
        second = DateRange(date(2026, 3, 13), date(2026, 3, 15))

        assert not first.overlaps_with(second)

    def test_span_over_thirty_days_is_rejected(self):
        DateRange(date(2026, 3, 1), date(2026, 3, 31)).validate_rental_span()

        with pytest.raises(InvalidRangeError):
            DateRange(date(2026, 3, 1), date(2026, 4, 1)).validate_rental_span()
