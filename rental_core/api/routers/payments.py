from fastapi import APIRouter, Depends, status

from rental_core.api.dependencies import get_use_cases
from rental_core.api.schemas.payments import (
    PaymentOutcomeRequest,
    PaymentResponse,
    RefundRequest,
    RefundResponse,
    SubmitPaymentRequest,
)
from rental_core.application.dtos import PaymentOutcomeDTO, SubmitPaymentDTO

router = APIRouter()


@router.get(
    "/payments/{payment_id}",
    response_model=PaymentResponse,
    status_code=status.HTTP_200_OK,
)
async def get_payment(
    payment_id: int,
    use_cases=Depends(get_use_cases),
) -> PaymentResponse:
    payment = await use_cases["get_payment"].execute(payment_id)
    return PaymentResponse.model_validate(payment)


@router.post(
    "/payments/{payment_id}/submit",
    response_model=PaymentResponse,
    status_code=status.HTTP_200_OK,
)
async def submit_payment(
    payment_id: int,
    payload: SubmitPaymentRequest,
    use_cases=Depends(get_use_cases),
) -> PaymentResponse:
    payment = await use_cases["submit_payment"].execute(
        payment_id, SubmitPaymentDTO(method=payload.method, details=payload.details())
    )
    return PaymentResponse.model_validate(payment)


@router.post(
    "/payments/{payment_id}/outcome",
    response_model=PaymentResponse,
    status_code=status.HTTP_200_OK,
)
async def record_payment_outcome(
    payment_id: int,
    payload: PaymentOutcomeRequest,
    use_cases=Depends(get_use_cases),
) -> PaymentResponse:
    """Webhook de liquidación: confirma o rechaza un pago pendiente."""
    payment = await use_cases["record_payment_outcome"].execute(
        payment_id,
        PaymentOutcomeDTO(
            outcome=payload.outcome,
            reference=payload.reference,
            metadata=payload.metadata,
        ),
    )
    return PaymentResponse.model_validate(payment)


@router.post(
    "/payments/{payment_id}/refund",
    response_model=RefundResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_refund(
    payment_id: int,
    payload: RefundRequest,
    use_cases=Depends(get_use_cases),
) -> RefundResponse:
    result = await use_cases["request_refund"].execute(
        payment_id, reason=payload.reason, amount=payload.amount
    )
    return RefundResponse.model_validate(result)
