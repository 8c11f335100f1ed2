from datetime import date

from fastapi import APIRouter, Depends, Query, status

from rental_core.api.dependencies import get_use_cases
from rental_core.api.schemas.vehicles import (
    AvailabilityResponse,
    RegisterVehicleRequest,
    SetVehicleStatusRequest,
    VehicleResponse,
)

router = APIRouter()


@router.post(
    "/vehicles",
    response_model=VehicleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_vehicle(
    payload: RegisterVehicleRequest,
    use_cases=Depends(get_use_cases),
) -> VehicleResponse:
    vehicle = await use_cases["register_vehicle"].execute(
        plate=payload.plate,
        brand=payload.brand,
        model=payload.model,
        daily_rate=payload.daily_rate,
        mileage=payload.mileage,
    )
    return VehicleResponse.model_validate(vehicle)


@router.patch(
    "/vehicles/{vehicle_id}/status",
    response_model=VehicleResponse,
    status_code=status.HTTP_200_OK,
)
async def set_vehicle_status(
    vehicle_id: int,
    payload: SetVehicleStatusRequest,
    use_cases=Depends(get_use_cases),
) -> VehicleResponse:
    vehicle = await use_cases["set_vehicle_status"].execute(vehicle_id, payload.status)
    return VehicleResponse.model_validate(vehicle)


@router.get(
    "/vehicles/{vehicle_id}/availability",
    response_model=AvailabilityResponse,
    status_code=status.HTTP_200_OK,
)
async def check_availability(
    vehicle_id: int,
    start_date: date = Query(...),
    end_date: date = Query(...),
    use_cases=Depends(get_use_cases),
) -> AvailabilityResponse:
    result = await use_cases["check_availability"].execute(vehicle_id, start_date, end_date)
    return AvailabilityResponse.model_validate(result)
