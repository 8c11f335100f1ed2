from datetime import date

from fastapi import APIRouter, Depends, Query, status

from rental_core.api.dependencies import get_use_cases
from rental_core.api.schemas.reservations import (
    CalculatePriceRequest,
    CancelReservationRequest,
    CancelReservationResponse,
    CompleteReservationRequest,
    CompleteReservationResponse,
    CreateReservationRequest,
    CreateReservationResponse,
    PriceQuoteResponse,
    ReservationResponse,
)
from rental_core.application.dtos import CompleteReservationDTO, CreateReservationDTO
from rental_core.application.interfaces.reservation_repo import ReservationFilters
from rental_core.domain.entities.reservation import ReservationPaymentStatus, ReservationStatus

router = APIRouter()


@router.post(
    "/reservations/calculate-price",
    response_model=PriceQuoteResponse,
    status_code=status.HTTP_200_OK,
)
async def calculate_price(
    payload: CalculatePriceRequest,
    use_cases=Depends(get_use_cases),
) -> PriceQuoteResponse:
    quote = await use_cases["calculate_price"].execute(
        vehicle_id=payload.vehicle_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        insurance_tier=payload.insurance_tier,
    )
    return PriceQuoteResponse.model_validate(quote)


@router.post(
    "/reservations",
    response_model=CreateReservationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reservation(
    payload: CreateReservationRequest,
    use_cases=Depends(get_use_cases),
) -> CreateReservationResponse:
    result = await use_cases["create_reservation"].execute(
        CreateReservationDTO(**payload.model_dump())
    )
    return CreateReservationResponse.model_validate(result)


@router.get(
    "/reservations",
    response_model=list[ReservationResponse],
    status_code=status.HTTP_200_OK,
)
async def list_reservations(
    status_filter: ReservationStatus | None = Query(default=None, alias="status"),
    payment_status: ReservationPaymentStatus | None = Query(default=None),
    vehicle_id: int | None = Query(default=None),
    requester_id: int | None = Query(default=None),
    start_date_from: date | None = Query(default=None),
    start_date_to: date | None = Query(default=None),
    overdue: bool = Query(default=False),
    limit: int = Query(default=15, ge=1, le=50),
    offset: int = Query(default=0, ge=0),
    use_cases=Depends(get_use_cases),
) -> list[ReservationResponse]:
    filters = ReservationFilters(
        status=status_filter,
        payment_status=payment_status,
        vehicle_id=vehicle_id,
        requester_id=requester_id,
        start_date_from=start_date_from,
        start_date_to=start_date_to,
    )
    reservations = await use_cases["list_reservations"].execute(
        filters, overdue=overdue, limit=limit, offset=offset
    )
    return [ReservationResponse.model_validate(r) for r in reservations]


@router.get(
    "/reservations/{reservation_id}",
    response_model=ReservationResponse,
    status_code=status.HTTP_200_OK,
)
async def get_reservation(
    reservation_id: int,
    use_cases=Depends(get_use_cases),
) -> ReservationResponse:
    reservation = await use_cases["get_reservation"].execute(reservation_id)
    return ReservationResponse.model_validate(reservation)


@router.post(
    "/reservations/{reservation_id}/activate",
    response_model=ReservationResponse,
    status_code=status.HTTP_200_OK,
)
async def activate_reservation(
    reservation_id: int,
    use_cases=Depends(get_use_cases),
) -> ReservationResponse:
    reservation = await use_cases["activate_reservation"].execute(reservation_id)
    return ReservationResponse.model_validate(reservation)


@router.post(
    "/reservations/{reservation_id}/complete",
    response_model=CompleteReservationResponse,
    status_code=status.HTTP_200_OK,
)
async def complete_reservation(
    reservation_id: int,
    payload: CompleteReservationRequest,
    use_cases=Depends(get_use_cases),
) -> CompleteReservationResponse:
    result = await use_cases["complete_reservation"].execute(
        reservation_id, CompleteReservationDTO(**payload.model_dump())
    )
    return CompleteReservationResponse.model_validate(result)


@router.post(
    "/reservations/{reservation_id}/cancel",
    response_model=CancelReservationResponse,
    status_code=status.HTTP_200_OK,
)
async def cancel_reservation(
    reservation_id: int,
    payload: CancelReservationRequest,
    use_cases=Depends(get_use_cases),
) -> CancelReservationResponse:
    result = await use_cases["cancel_reservation"].execute(reservation_id, payload.reason)
    return CancelReservationResponse.model_validate(result)
