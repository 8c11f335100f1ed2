from datetime import timedelta
from decimal import Decimal

import pytest

from conftest import days_from_today
from rental_core.application.dtos import CompleteReservationDTO
from rental_core.application.interfaces.reservation_repo import ReservationFilters
from rental_core.domain.entities.reservation import InsuranceTier, ReservationStatus
from rental_core.domain.entities.vehicle import VehicleStatus
from rental_core.domain.errors import (
    InvalidAmountError,
    InvalidRangeError,
    ValidationError,
    VehicleNotFoundError,
)
from rental_core.domain.value_objects.date_range import start_of_day


class TestRegisterVehicle:
    async def test_register_vehicle(self, use_cases, clock):
        vehicle = await use_cases.register_vehicle.execute(
            plate="xyz9a88", brand="Honda", model="CG 160", daily_rate=Decimal("89.9")
        )

        assert vehicle.id is not None
        assert vehicle.plate == "XYZ9A88"
        assert vehicle.daily_rate == Decimal("89.90")
        assert vehicle.currency_code == "BRL"
        assert vehicle.status == VehicleStatus.AVAILABLE
        assert vehicle.created_at == clock.now()

    async def test_plate_is_unique(self, use_cases, vehicle):
        with pytest.raises(ValidationError):
            await use_cases.register_vehicle.execute(
                plate="abc1d23", brand="VW", model="Gol", daily_rate=Decimal("70")
            )

    async def test_rate_must_be_positive(self, use_cases):
        with pytest.raises(InvalidAmountError):
            await use_cases.register_vehicle.execute(
                plate="NEW0001", brand="VW", model="Gol", daily_rate=Decimal("0")
            )


class TestSetVehicleStatus:
    async def test_maintenance_and_back(self, use_cases, vehicle):
        updated = await use_cases.set_vehicle_status.execute(vehicle.id, VehicleStatus.MAINTENANCE)
        assert updated.status == VehicleStatus.MAINTENANCE

        released = await use_cases.set_vehicle_status.execute(vehicle.id, VehicleStatus.AVAILABLE)
        assert released.status == VehicleStatus.AVAILABLE

    async def test_available_is_projected_to_rented(self, use_cases, vehicle, make_reservation):
        await make_reservation()
        await use_cases.set_vehicle_status.execute(vehicle.id, VehicleStatus.MAINTENANCE)

        updated = await use_cases.set_vehicle_status.execute(vehicle.id, VehicleStatus.AVAILABLE)

        assert updated.status == VehicleStatus.RENTED

    async def test_rented_cannot_be_set(self, use_cases, vehicle):
        with pytest.raises(ValidationError):
            await use_cases.set_vehicle_status.execute(vehicle.id, VehicleStatus.RENTED)

    async def test_unknown_vehicle(self, use_cases):
        with pytest.raises(VehicleNotFoundError):
            await use_cases.set_vehicle_status.execute(77, VehicleStatus.INACTIVE)


class TestCheckAvailability:
    async def test_free_calendar(self, use_cases, vehicle):
        result = await use_cases.check_availability.execute(
            vehicle.id, days_from_today(5), days_from_today(7)
        )

        assert result.available
        assert result.conflicting_reservation_ids == []
        assert result.vehicle_status == VehicleStatus.AVAILABLE

    async def test_overlap_blocks(self, use_cases, vehicle, make_reservation):
        created = await make_reservation(start_in=5, days=3)

        result = await use_cases.check_availability.execute(
            vehicle.id, days_from_today(7), days_from_today(9)
        )

        assert not result.available
        assert result.conflicting_reservation_ids == [created.reservation.id]

    async def test_cached_status_does_not_decide(self, use_cases, vehicle, make_reservation):
        await make_reservation(start_in=5, days=3)

        result = await use_cases.check_availability.execute(
            vehicle.id, days_from_today(10), days_from_today(12)
        )

        assert result.available
        assert result.vehicle_status == VehicleStatus.RENTED

    async def test_completed_reservations_do_not_block(self, use_cases, clock, vehicle, paid_reservation):
        created = await paid_reservation(start_in=5, days=3)
        clock.set_time(start_of_day(created.reservation.end_date))
        await use_cases.complete_reservation.execute(
            created.reservation.id, CompleteReservationDTO(final_mileage=1300)
        )

        result = await use_cases.check_availability.execute(
            vehicle.id, days_from_today(5), days_from_today(7)
        )

        assert result.available

    async def test_unknown_vehicle(self, use_cases):
        with pytest.raises(VehicleNotFoundError):
            await use_cases.check_availability.execute(
                5, days_from_today(1), days_from_today(2)
            )


class TestCalculatePrice:
    async def test_prices_with_current_rate(self, use_cases, vehicle):
        quote = await use_cases.calculate_price.execute(
            vehicle.id, days_from_today(1), days_from_today(7), InsuranceTier.FULL
        )

        assert quote.days == 7
        assert quote.discount == Decimal("70.00")
        assert quote.insurance_fee == Decimal("280.00")
        assert quote.total_amount == Decimal("910.00")

    async def test_span_limit(self, use_cases, vehicle):
        with pytest.raises(InvalidRangeError):
            await use_cases.calculate_price.execute(
                vehicle.id, days_from_today(1), days_from_today(40)
            )


class TestListReservations:
    async def test_newest_first_with_filters(self, use_cases, clock, make_reservation):
        first = await make_reservation(start_in=5, days=3)
        clock.advance(minutes=5)
        second = await make_reservation(start_in=10, days=3)
        await use_cases.cancel_reservation.execute(first.reservation.id, "duplicada")

        everything = await use_cases.list_reservations.execute(ReservationFilters())
        cancelled = await use_cases.list_reservations.execute(
            ReservationFilters(status=ReservationStatus.CANCELLED)
        )

        assert [r.id for r in everything] == [second.reservation.id, first.reservation.id]
        assert [r.id for r in cancelled] == [first.reservation.id]
        assert len(everything[0].payments) == 1

    async def test_pagination(self, use_cases, clock, make_reservation):
        for start_in in (5, 10, 15):
            await make_reservation(start_in=start_in, days=3)
            clock.advance(minutes=1)

        page = await use_cases.list_reservations.execute(ReservationFilters(), limit=2, offset=1)

        assert len(page) == 2

    async def test_overdue_filter(self, use_cases, clock, paid_reservation):
        late = await paid_reservation(start_in=2, days=2)
        await paid_reservation(start_in=10, days=3)
        clock.set_time(start_of_day(late.reservation.end_date) + timedelta(hours=6))

        overdue = await use_cases.list_reservations.execute(ReservationFilters(), overdue=True)

        assert [r.id for r in overdue] == [late.reservation.id]

    async def test_invalid_limit(self, use_cases):
        with pytest.raises(ValidationError):
            await use_cases.list_reservations.execute(ReservationFilters(), limit=0)
