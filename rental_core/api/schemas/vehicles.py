from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, condecimal, constr

from rental_core.domain.entities.vehicle import VehicleStatus

Money = condecimal(max_digits=12, decimal_places=2)


class RegisterVehicleRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    plate: constr(strip_whitespace=True, min_length=1, max_length=16)
    brand: constr(strip_whitespace=True, min_length=1, max_length=100)
    model: constr(strip_whitespace=True, min_length=1, max_length=100)
    daily_rate: Money = Field(..., gt=0)
    mileage: int = Field(default=0, ge=0)


class SetVehicleStatusRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: VehicleStatus


class VehicleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    plate: str
    brand: str
    model: str
    daily_rate: Decimal
    currency_code: str
    mileage: int
    status: VehicleStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AvailabilityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    vehicle_id: int
    start_date: date
    end_date: date
    available: bool
    vehicle_status: VehicleStatus
    conflicting_reservation_ids: list[int] = Field(default_factory=list)
