from datetime import date

from rental_core.application.interfaces.vehicle_repo import VehicleRepo
from rental_core.domain.entities.reservation import InsuranceTier
from rental_core.domain.errors import VehicleNotFoundError
from rental_core.domain.services.pricing import PriceQuote, calculate_price
from rental_core.domain.value_objects.date_range import DateRange


class CalculatePriceUseCase:
    """Cotiza una locación con la tarifa diaria vigente del vehículo."""

    def __init__(self, vehicle_repo: VehicleRepo) -> None:
        self._vehicle_repo = vehicle_repo

    async def execute(
        self,
        vehicle_id: int,
        start_date: date,
        end_date: date,
        insurance_tier: InsuranceTier | None = None,
    ) -> PriceQuote:
        DateRange(start=start_date, end=end_date).validate_rental_span()

        vehicle = await self._vehicle_repo.get(vehicle_id)
        if vehicle is None:
            raise VehicleNotFoundError(vehicle_id)

        return calculate_price(
            daily_rate=vehicle.daily_rate,
            start_date=start_date,
            end_date=end_date,
            insurance_tier=insurance_tier,
            currency_code=vehicle.currency_code,
        )
