import logging

from rental_core.application.dtos.payment_dto import PaymentOutcomeDTO, SubmitPaymentDTO
from rental_core.application.interfaces.clock import Clock
from rental_core.application.interfaces.lock_manager import LockManager, payment_lock
from rental_core.application.interfaces.payment_repo import PaymentRepo
from rental_core.application.interfaces.settlement_gateway import SettlementGatewayProvider
from rental_core.application.interfaces.transaction_manager import TransactionManager
from rental_core.application.use_cases.record_payment_outcome import RecordPaymentOutcomeUseCase
from rental_core.domain.entities.payment import Payment, PaymentStatus, PaymentType
from rental_core.domain.errors import InvalidStateError, PaymentNotFoundError, ValidationError


class SubmitPaymentUseCase:
    """
    El cliente elige el método de un pago pendiente. El proveedor del método
    devuelve un resultado y metadatos opacos (código PIX, línea digitable,
    autorización) que se guardan tal cual; el resultado se aplica como una
    señal de liquidación más.
    """

    def __init__(
        self,
        payment_repo: PaymentRepo,
        transaction_manager: TransactionManager,
        lock_manager: LockManager,
        clock: Clock,
        gateway_provider: SettlementGatewayProvider,
        record_outcome: RecordPaymentOutcomeUseCase,
    ) -> None:
        self._payment_repo = payment_repo
        self._transaction_manager = transaction_manager
        self._lock_manager = lock_manager
        self._clock = clock
        self._gateway_provider = gateway_provider
        self._record_outcome = record_outcome
        self._logger = logging.getLogger(__name__)

    async def execute(self, payment_id: int, request: SubmitPaymentDTO) -> Payment:
        async with self._lock_manager.acquire(payment_lock(payment_id)):
            async with self._transaction_manager.start():
                payment = await self._payment_repo.get(payment_id)
                if payment is None:
                    raise PaymentNotFoundError(payment_id)
                if payment.type == PaymentType.REFUND:
                    raise ValidationError("payment_id", "los reembolsos no se pagan")
                if not payment.is_pending:
                    raise InvalidStateError(
                        entity=f"el pago {payment.id}",
                        current_status=payment.status.value,
                        expected_status=PaymentStatus.PENDING.value,
                        operation="procesar",
                    )

                gateway = self._gateway_provider.for_method(request.method)
                result = await gateway.settle(payment, request.details)

                now = self._clock.now()
                expected_lock_version = payment.lock_version
                payment.choose_method(request.method, now)
                payment.attach_settlement(result.reference, result.metadata, now)
                payment = await self._payment_repo.update(payment, expected_lock_version)

                self._logger.info(
                    "Payment submitted",
                    extra={
                        "payment_id": payment.id,
                        "method": request.method.value,
                        "settlement_status": result.status.value,
                        "gateway_reference": result.reference,
                    },
                )

                if result.status != PaymentStatus.PENDING:
                    payment = await self._record_outcome.apply(
                        payment, PaymentOutcomeDTO(outcome=result.status)
                    )
                return payment
