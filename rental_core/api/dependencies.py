from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rental_core.api.deps import AsyncSessionLocal
from rental_core.application.interfaces.clock import Clock, SystemClock
from rental_core.application.interfaces.uuid_generator import RealUUIDGenerator, UUIDGenerator
from rental_core.application.use_cases import (
    ActivateReservationUseCase,
    CalculatePriceUseCase,
    CancelReservationUseCase,
    CheckAvailabilityUseCase,
    CompleteReservationUseCase,
    CreateReservationUseCase,
    GetPaymentUseCase,
    GetReservationUseCase,
    ListReservationsUseCase,
    RecordPaymentOutcomeUseCase,
    RegisterVehicleUseCase,
    RequestRefundUseCase,
    ReservationActivationListener,
    SetVehicleStatusUseCase,
    SubmitPaymentUseCase,
)
from rental_core.config import Settings, get_settings
from rental_core.domain.entities.payment import PaymentMethod
from rental_core.infrastructure.db.repositories import (
    PaymentRepoSQL,
    ReservationRepoSQL,
    VehicleRepoSQL,
)
from rental_core.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from rental_core.infrastructure.gateways import (
    BoletoSettlementGateway,
    CreditCardSettlementGateway,
    PixSettlementGateway,
    SettlementGatewaySelector,
)
from rental_core.infrastructure.in_memory.lock_manager import InMemoryLockManager
from rental_core.infrastructure.in_memory.payment_repo import InMemoryPaymentRepo
from rental_core.infrastructure.in_memory.reservation_repo import InMemoryReservationRepo
from rental_core.infrastructure.in_memory.transaction_manager import NoopTransactionManager
from rental_core.infrastructure.in_memory.vehicle_repo import InMemoryVehicleRepo

# Los locks del proceso se comparten entre requests también en modo SQL
_sql_lock_manager = InMemoryLockManager()


async def get_session(settings: Settings = Depends(get_settings)) -> AsyncSession | None:
    if settings.use_in_memory:
        yield None
        return
    async with AsyncSessionLocal() as session:
        try:
            yield session
            # Lecturas previas a la transacción explícita dejan una transacción abierta
            if session.in_transaction():
                await session.commit()
        except Exception:
            await session.rollback()
            raise


def _build_gateway_selector(settings: Settings, clock: Clock, uuid_generator: UUIDGenerator):
    pix = PixSettlementGateway(clock, uuid_generator, pix_key=settings.pix_key)
    selector = SettlementGatewaySelector(default_gateway=pix)
    selector.register(PaymentMethod.PIX, pix)
    selector.register(
        PaymentMethod.BOLETO,
        BoletoSettlementGateway(clock, uuid_generator, due_days=settings.boleto_due_days),
    )
    selector.register(
        PaymentMethod.CREDIT_CARD,
        CreditCardSettlementGateway(
            clock, uuid_generator, outcome=settings.card_settlement_outcome
        ),
    )
    return selector


@lru_cache(maxsize=1)
def _in_memory_bundle():
    settings = get_settings()
    clock = SystemClock()
    uuid_generator = RealUUIDGenerator()
    return {
        "vehicle_repo": InMemoryVehicleRepo(),
        "reservation_repo": InMemoryReservationRepo(),
        "payment_repo": InMemoryPaymentRepo(),
        "tx_manager": NoopTransactionManager(),
        "lock_manager": InMemoryLockManager(),
        "clock": clock,
        "uuid_generator": uuid_generator,
        "gateway_selector": _build_gateway_selector(settings, clock, uuid_generator),
    }


def _sql_bundle(settings: Settings, session: AsyncSession):
    clock = SystemClock()
    uuid_generator = RealUUIDGenerator()
    return {
        "vehicle_repo": VehicleRepoSQL(session),
        "reservation_repo": ReservationRepoSQL(session),
        "payment_repo": PaymentRepoSQL(session),
        "tx_manager": SQLAlchemyTransactionManager(session),
        "lock_manager": _sql_lock_manager,
        "clock": clock,
        "uuid_generator": uuid_generator,
        "gateway_selector": _build_gateway_selector(settings, clock, uuid_generator),
    }


def _build_use_cases(bundle: dict, settings: Settings) -> dict:
    vehicle_repo = bundle["vehicle_repo"]
    reservation_repo = bundle["reservation_repo"]
    payment_repo = bundle["payment_repo"]
    tx_manager = bundle["tx_manager"]
    lock_manager = bundle["lock_manager"]
    clock = bundle["clock"]
    uuid_generator = bundle["uuid_generator"]
    gateway_selector = bundle["gateway_selector"]

    reservation_ops = dict(
        vehicle_repo=vehicle_repo,
        reservation_repo=reservation_repo,
        payment_repo=payment_repo,
        transaction_manager=tx_manager,
        lock_manager=lock_manager,
        clock=clock,
        uuid_generator=uuid_generator,
    )
    record_outcome = RecordPaymentOutcomeUseCase(
        payment_repo=payment_repo,
        transaction_manager=tx_manager,
        lock_manager=lock_manager,
        clock=clock,
        rental_payment_listener=ReservationActivationListener(
            reservation_repo=reservation_repo,
            transaction_manager=tx_manager,
            lock_manager=lock_manager,
            clock=clock,
        ),
    )

    return {
        "register_vehicle": RegisterVehicleUseCase(
            vehicle_repo=vehicle_repo,
            transaction_manager=tx_manager,
            clock=clock,
            currency_code=settings.currency_code,
        ),
        "set_vehicle_status": SetVehicleStatusUseCase(
            vehicle_repo=vehicle_repo,
            reservation_repo=reservation_repo,
            transaction_manager=tx_manager,
            lock_manager=lock_manager,
            clock=clock,
        ),
        "check_availability": CheckAvailabilityUseCase(
            vehicle_repo=vehicle_repo, reservation_repo=reservation_repo
        ),
        "calculate_price": CalculatePriceUseCase(vehicle_repo=vehicle_repo),
        "create_reservation": CreateReservationUseCase(**reservation_ops),
        "activate_reservation": ActivateReservationUseCase(
            reservation_repo=reservation_repo,
            transaction_manager=tx_manager,
            lock_manager=lock_manager,
            clock=clock,
        ),
        "complete_reservation": CompleteReservationUseCase(**reservation_ops),
        "cancel_reservation": CancelReservationUseCase(**reservation_ops),
        "get_reservation": GetReservationUseCase(
            reservation_repo=reservation_repo, payment_repo=payment_repo
        ),
        "list_reservations": ListReservationsUseCase(
            reservation_repo=reservation_repo, payment_repo=payment_repo, clock=clock
        ),
        "get_payment": GetPaymentUseCase(payment_repo=payment_repo),
        "record_payment_outcome": record_outcome,
        "submit_payment": SubmitPaymentUseCase(
            payment_repo=payment_repo,
            transaction_manager=tx_manager,
            lock_manager=lock_manager,
            clock=clock,
            gateway_provider=gateway_selector,
            record_outcome=record_outcome,
        ),
        "request_refund": RequestRefundUseCase(
            payment_repo=payment_repo,
            reservation_repo=reservation_repo,
            transaction_manager=tx_manager,
            lock_manager=lock_manager,
            clock=clock,
            uuid_generator=uuid_generator,
            gateway_provider=gateway_selector,
        ),
    }


def get_use_cases(
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_session),
):
    if settings.use_in_memory:
        return _build_use_cases(_in_memory_bundle(), settings)

    if not session:
        raise RuntimeError("DB session not available")
    return _build_use_cases(_sql_bundle(settings, session), settings)
