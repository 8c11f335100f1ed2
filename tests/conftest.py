"""
Pytest configuration and shared fixtures.

Este módulo provee fixtures reutilizables para:
- Reloj y generador de referencias deterministas
- Repositorios, locks y transacciones in-memory
- Casos de uso cableados como en la API
- Base de datos SQLite in-memory para los repositorios SQL
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from rental_core.application.dtos import CreateReservationDTO, PaymentOutcomeDTO
from rental_core.application.interfaces.clock import FakeClock
from rental_core.application.interfaces.uuid_generator import FakeUUIDGenerator
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
from rental_core.domain.entities.payment import PaymentStatus
from rental_core.domain.entities.vehicle import Vehicle, VehicleStatus
from rental_core.infrastructure.db.tables import metadata
from rental_core.infrastructure.gateways import SettlementGatewaySelector
from rental_core.infrastructure.gateways.in_memory import StubSettlementGateway
from rental_core.infrastructure.in_memory import (
    InMemoryLockManager,
    InMemoryPaymentRepo,
    InMemoryReservationRepo,
    InMemoryTransactionManager,
    InMemoryVehicleRepo,
)

# Domingo 1 de marzo de 2026, 12:00 UTC
NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
TODAY = NOW.date()

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def days_from_today(days: int) -> date:
    return TODAY + timedelta(days=days)


# ============================================================================
# FIXTURES DE INFRAESTRUCTURA IN-MEMORY
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def uuid_generator() -> FakeUUIDGenerator:
    return FakeUUIDGenerator()


@pytest.fixture
def vehicle_repo() -> InMemoryVehicleRepo:
    return InMemoryVehicleRepo()


@pytest.fixture
def reservation_repo() -> InMemoryReservationRepo:
    return InMemoryReservationRepo()


@pytest.fixture
def payment_repo() -> InMemoryPaymentRepo:
    return InMemoryPaymentRepo()


@pytest.fixture
def lock_manager() -> InMemoryLockManager:
    return InMemoryLockManager()


@pytest.fixture
def gateway() -> StubSettlementGateway:
    """Gateway por defecto: deja los pagos pendientes y completa los reembolsos."""
    return StubSettlementGateway()


@pytest.fixture
def use_cases(
    clock,
    uuid_generator,
    vehicle_repo,
    reservation_repo,
    payment_repo,
    lock_manager,
    gateway,
) -> SimpleNamespace:
    """
    Todos los casos de uso sobre los mismos repositorios in-memory.

    Se cablean igual que en `rental_core.api.dependencies`.
    """
    tx_manager = InMemoryTransactionManager()
    selector = SettlementGatewaySelector(default_gateway=gateway)
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
    return SimpleNamespace(
        register_vehicle=RegisterVehicleUseCase(vehicle_repo, tx_manager, clock),
        set_vehicle_status=SetVehicleStatusUseCase(
            vehicle_repo, reservation_repo, tx_manager, lock_manager, clock
        ),
        check_availability=CheckAvailabilityUseCase(vehicle_repo, reservation_repo),
        calculate_price=CalculatePriceUseCase(vehicle_repo),
        create_reservation=CreateReservationUseCase(**reservation_ops),
        activate_reservation=ActivateReservationUseCase(
            reservation_repo, tx_manager, lock_manager, clock
        ),
        complete_reservation=CompleteReservationUseCase(**reservation_ops),
        cancel_reservation=CancelReservationUseCase(**reservation_ops),
        get_reservation=GetReservationUseCase(reservation_repo, payment_repo),
        list_reservations=ListReservationsUseCase(reservation_repo, payment_repo, clock),
        get_payment=GetPaymentUseCase(payment_repo),
        record_payment_outcome=record_outcome,
        submit_payment=SubmitPaymentUseCase(
            payment_repo, tx_manager, lock_manager, clock, selector, record_outcome
        ),
        request_refund=RequestRefundUseCase(
            payment_repo, reservation_repo, tx_manager, lock_manager, clock, uuid_generator, selector
        ),
    )


# ============================================================================
# FIXTURES DE DATOS DE PRUEBA
# ============================================================================

@pytest_asyncio.fixture
async def vehicle(vehicle_repo) -> Vehicle:
    """Vehículo disponible con tarifa diaria de 100.00."""
    return await vehicle_repo.add(
        Vehicle(
            plate="ABC1D23",
            brand="Fiat",
            model="Argo",
            daily_rate=Decimal("100.00"),
            mileage=1000,
            status=VehicleStatus.AVAILABLE,
            created_at=NOW,
            updated_at=NOW,
        )
    )


def reservation_request(vehicle_id: int, start_in: int = 5, days: int = 3, **overrides):
    """Solicitud de reservación de `days` días inclusivos que empieza en `start_in` días."""
    values = dict(
        vehicle_id=vehicle_id,
        requester_id=42,
        start_date=days_from_today(start_in),
        end_date=days_from_today(start_in + days - 1),
        pickup_location="Aeropuerto GRU",
    )
    values.update(overrides)
    return CreateReservationDTO(**values)


@pytest.fixture
def make_reservation(use_cases, vehicle):
    """Crea una reservación sobre el vehículo de prueba."""

    async def _make(start_in: int = 5, days: int = 3, **overrides):
        return await use_cases.create_reservation.execute(
            reservation_request(vehicle.id, start_in=start_in, days=days, **overrides)
        )

    return _make


@pytest.fixture
def paid_reservation(use_cases, make_reservation):
    """Crea una reservación y completa su pago de locación (queda activa)."""

    async def _make(start_in: int = 5, days: int = 3, **overrides):
        created = await make_reservation(start_in=start_in, days=days, **overrides)
        await use_cases.record_payment_outcome.execute(
            created.rental_payment.id, PaymentOutcomeDTO(outcome=PaymentStatus.COMPLETED)
        )
        return created

    return _make


# ============================================================================
# FIXTURES DE BASE DE DATOS
# ============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Engine SQLite in-memory con el esquema creado."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Sesión por test; lo que no se confirmó se descarta al cerrar."""
    session_maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session
