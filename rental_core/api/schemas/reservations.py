from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, condecimal, constr

from rental_core.api.schemas.payments import PaymentResponse
from rental_core.domain.entities.reservation import (
    InsuranceTier,
    ReservationPaymentStatus,
    ReservationStatus,
)

Money = condecimal(max_digits=12, decimal_places=2)


class CalculatePriceRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    vehicle_id: int
    start_date: date
    end_date: date
    insurance_tier: InsuranceTier | None = None


class PriceQuoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    days: int
    daily_rate: Decimal
    base_cost: Decimal
    discount: Decimal
    discount_percent: Decimal
    insurance_fee: Decimal
    security_deposit: Decimal
    total_amount: Decimal
    currency_code: str


class CreateReservationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    vehicle_id: int
    requester_id: int
    start_date: date
    end_date: date
    pickup_location: constr(strip_whitespace=True, min_length=1, max_length=255)
    return_location: constr(strip_whitespace=True, max_length=255) | None = None
    insurance_tier: InsuranceTier | None = None
    notes: constr(max_length=500) | None = None


class CompleteReservationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    final_mileage: int = Field(..., ge=0)
    additional_charges: Money = Field(default=Decimal("0"), ge=0)
    additional_charges_description: constr(max_length=500) | None = None
    notes: constr(max_length=500) | None = None


class CancelReservationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reason: constr(strip_whitespace=True, min_length=1, max_length=500)


class ReservationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    vehicle_id: int
    requester_id: int
    start_date: date
    end_date: date
    days: int
    currency_code: str
    daily_rate: Decimal
    base_cost: Decimal
    discount: Decimal
    insurance_tier: InsuranceTier | None = None
    insurance_fee: Decimal
    total_amount: Decimal
    security_deposit: Decimal
    additional_charges: Decimal | None = None
    additional_charges_description: str | None = None
    status: ReservationStatus
    payment_status: ReservationPaymentStatus
    pickup_location: str
    return_location: str
    notes: str | None = None
    cancellation_reason: str | None = None
    initial_mileage: int | None = None
    final_mileage: int | None = None
    actual_return_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    payments: list[PaymentResponse] = Field(default_factory=list)


class CreateReservationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reservation: ReservationResponse
    rental_payment: PaymentResponse


class CompleteReservationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reservation: ReservationResponse
    overdue_days: int
    overdue_penalty: Decimal
    total_additional_charges: Decimal
    additional_payment: PaymentResponse | None = None


class CancelReservationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reservation: ReservationResponse
    hours_until_start: Decimal
    refund_percent: Decimal
    refund_amount: Decimal
    cancellation_fee: Decimal
    refund_payment: PaymentResponse | None = None
    fee_payment: PaymentResponse | None = None
