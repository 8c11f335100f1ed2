from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, condecimal, constr, model_validator

from rental_core.domain.entities.payment import PaymentMethod, PaymentStatus, PaymentType


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    reservation_id: int
    transaction_id: str | None = None
    amount: Decimal
    currency_code: str
    type: PaymentType
    method: PaymentMethod | None = None
    status: PaymentStatus
    description: str | None = None
    refunded_payment_id: int | None = None
    gateway_reference: str | None = None
    gateway_response: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    completed_at: datetime | None = None
    refunded_at: datetime | None = None


class SubmitPaymentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    method: PaymentMethod
    card_number: constr(strip_whitespace=True, min_length=13, max_length=23) | None = None
    card_holder_name: constr(strip_whitespace=True, max_length=255) | None = None
    installments: int = Field(default=1, ge=1, le=12)
    due_date: date | None = None

    @model_validator(mode="after")
    def _card_details(self) -> "SubmitPaymentRequest":
        if self.method == PaymentMethod.CREDIT_CARD and not self.card_number:
            raise ValueError("card_number is required for credit_card payments")
        return self

    def details(self) -> dict[str, Any]:
        return self.model_dump(exclude={"method"}, exclude_none=True)


class PaymentOutcomeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    outcome: PaymentStatus
    reference: constr(strip_whitespace=True, max_length=128) | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class RefundRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reason: constr(strip_whitespace=True, min_length=1, max_length=500)
    amount: condecimal(gt=0, max_digits=12, decimal_places=2) | None = None


class RefundResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    original_payment: PaymentResponse
    refund_payment: PaymentResponse
    refunded_total: Decimal
    remaining_refundable: Decimal
