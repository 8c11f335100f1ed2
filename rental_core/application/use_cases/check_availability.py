import logging
from datetime import date

from rental_core.application.dtos.reservation_dto import AvailabilityDTO
from rental_core.application.interfaces.reservation_repo import ReservationRepo
from rental_core.application.interfaces.vehicle_repo import VehicleRepo
from rental_core.domain.entities.reservation import Reservation
from rental_core.domain.errors import VehicleNotFoundError
from rental_core.domain.value_objects.date_range import DateRange


async def find_conflicts(
    reservation_repo: ReservationRepo,
    vehicle_id: int,
    date_range: DateRange,
) -> list[Reservation]:
    """
    Reservaciones vivas del vehículo que se superponen con el rango.

    Solo `reserved` y `active` ocupan el calendario; el estado cacheado del
    vehículo no participa en la decisión.
    """
    live = await reservation_repo.list_live_for_vehicle(vehicle_id)
    return [
        reservation
        for reservation in live
        if reservation.date_range.overlaps_with(date_range)
    ]


class CheckAvailabilityUseCase:
    def __init__(self, vehicle_repo: VehicleRepo, reservation_repo: ReservationRepo) -> None:
        self._vehicle_repo = vehicle_repo
        self._reservation_repo = reservation_repo
        self._logger = logging.getLogger(__name__)

    async def execute(self, vehicle_id: int, start_date: date, end_date: date) -> AvailabilityDTO:
        date_range = DateRange(start=start_date, end=end_date)

        vehicle = await self._vehicle_repo.get(vehicle_id)
        if vehicle is None:
            raise VehicleNotFoundError(vehicle_id)

        conflicts = await find_conflicts(self._reservation_repo, vehicle_id, date_range)
        self._logger.debug(
            "Availability checked",
            extra={
                "vehicle_id": vehicle_id,
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
                "conflicts": len(conflicts),
            },
        )
        return AvailabilityDTO(
            vehicle_id=vehicle_id,
            start_date=start_date,
            end_date=end_date,
            available=not conflicts,
            vehicle_status=vehicle.status,
            conflicting_reservation_ids=[r.id for r in conflicts],
        )
