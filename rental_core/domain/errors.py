"""Excepciones de dominio para el sistema de locación de vehículos."""

from datetime import date


class DomainError(Exception):
    """Clase base para todos los errores de dominio."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


# === Errores de búsqueda ===


class NotFoundError(DomainError):
    """La entidad solicitada no existe."""

    def __init__(self, entity: str, entity_id: int | str, code: str = "NOT_FOUND"):
        super().__init__(message=f"{entity} no encontrado: {entity_id}", code=code)
        self.entity = entity
        self.entity_id = entity_id


class VehicleNotFoundError(NotFoundError):
    def __init__(self, vehicle_id: int):
        super().__init__("Vehículo", vehicle_id, code="VEHICLE_NOT_FOUND")
        self.vehicle_id = vehicle_id


class ReservationNotFoundError(NotFoundError):
    def __init__(self, reservation_id: int):
        super().__init__("Reservación", reservation_id, code="RESERVATION_NOT_FOUND")
        self.reservation_id = reservation_id


class PaymentNotFoundError(NotFoundError):
    def __init__(self, payment_id: int):
        super().__init__("Pago", payment_id, code="PAYMENT_NOT_FOUND")
        self.payment_id = payment_id


# === Errores de calendario ===


class ConflictError(DomainError):
    """El vehículo ya está reservado en un rango que se superpone."""

    def __init__(
        self,
        vehicle_id: int,
        start_date: date,
        end_date: date,
        conflicting_ids: list[int] | None = None,
    ):
        super().__init__(
            message=f"Vehículo {vehicle_id} no disponible entre {start_date.isoformat()} "
            f"y {end_date.isoformat()}",
            code="RESERVATION_CONFLICT",
        )
        self.vehicle_id = vehicle_id
        self.start_date = start_date
        self.end_date = end_date
        self.conflicting_ids = conflicting_ids or []


class InvalidRangeError(DomainError):
    """Rango de fechas inválido (orden o duración)."""

    def __init__(self, message: str):
        super().__init__(message=message, code="INVALID_DATE_RANGE")


# === Errores de estado ===


class InvalidStateError(DomainError):
    """El estado actual no permite la operación."""

    def __init__(
        self,
        entity: str,
        current_status: str,
        expected_status: str | list[str],
        operation: str,
        code: str = "INVALID_STATE",
    ):
        expected = expected_status if isinstance(expected_status, str) else ", ".join(expected_status)
        super().__init__(
            message=f"No se puede {operation} {entity}: estado actual '{current_status}', "
            f"esperado '{expected}'",
            code=code,
        )
        self.entity = entity
        self.current_status = current_status
        self.expected_status = expected_status
        self.operation = operation


class VehicleNotRentableError(InvalidStateError):
    """El vehículo está en mantenimiento o inactivo."""

    def __init__(self, vehicle_id: int, current_status: str):
        super().__init__(
            entity=f"vehículo {vehicle_id}",
            current_status=current_status,
            expected_status=["available", "rented"],
            operation="reservar",
            code="VEHICLE_NOT_RENTABLE",
        )
        self.vehicle_id = vehicle_id


class OptimisticLockError(DomainError):
    """Conflicto de concurrencia al actualizar una entidad."""

    def __init__(self, entity: str, entity_id: int, expected_version: int, actual_version: int):
        super().__init__(
            message=f"Conflicto de concurrencia en {entity} {entity_id}: "
            f"versión esperada {expected_version}, versión actual {actual_version}",
            code="OPTIMISTIC_LOCK_ERROR",
        )
        self.entity = entity
        self.entity_id = entity_id
        self.expected_version = expected_version
        self.actual_version = actual_version


# === Errores de pago ===


class NotRefundableError(DomainError):
    """El pago no es elegible para reembolso."""

    def __init__(self, payment_id: int, reason: str):
        super().__init__(
            message=f"El pago {payment_id} no puede ser reembolsado: {reason}",
            code="NOT_REFUNDABLE",
        )
        self.payment_id = payment_id
        self.reason = reason


class InvalidAmountError(DomainError):
    """Monto monetario inválido."""

    def __init__(self, message: str):
        super().__init__(message=message, code="INVALID_AMOUNT")


# === Errores de validación ===


class ValidationError(DomainError):
    """Error de validación de datos de entrada."""

    def __init__(self, field: str, message: str):
        super().__init__(
            message=f"Validación fallida en '{field}': {message}",
            code="VALIDATION_ERROR",
        )
        self.field = field
