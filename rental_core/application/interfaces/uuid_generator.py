"""Interface UUIDGenerator - Puerto para generación de identificadores de transacción."""

import secrets
import string
import time
from abc import ABC, abstractmethod


class UUIDGenerator(ABC):
    """
    Puerto para generación de referencias únicas.

    Permite inyectar implementaciones fake para testing determinista.
    """

    @abstractmethod
    def generate_transaction_id(self) -> str:
        """
        Genera la referencia de transacción de un pago.

        Returns:
            String con prefijo TRX, p.ej. TRXAB12CD34EF1767225600.
        """
        raise NotImplementedError

    @abstractmethod
    def generate_reference(self, prefix: str, length: int = 32) -> str:
        """
        Genera una referencia opaca para un proveedor de liquidación.

        Args:
            prefix: Prefijo legible (PIX, BOL, AUTH...).
            length: Cantidad de caracteres aleatorios.
        """
        raise NotImplementedError


class RealUUIDGenerator(UUIDGenerator):
    """Implementación real criptográficamente segura."""

    TRANSACTION_RANDOM_LENGTH = 10
    ALLOWED_CHARS = string.ascii_uppercase + string.digits

    def _random(self, length: int) -> str:
        return "".join(secrets.choice(self.ALLOWED_CHARS) for _ in range(length))

    def generate_transaction_id(self) -> str:
        return f"TRX{self._random(self.TRANSACTION_RANDOM_LENGTH)}{int(time.time())}"

    def generate_reference(self, prefix: str, length: int = 32) -> str:
        return f"{prefix}{self._random(length)}"


class FakeUUIDGenerator(UUIDGenerator):
    """
    Implementación fake para testing.

    Genera valores predecibles para pruebas deterministas.
    """

    def __init__(self, prefix: str = "TEST"):
        self._prefix = prefix
        self._transaction_counter = 0
        self._reference_counter = 0

    def generate_transaction_id(self) -> str:
        self._transaction_counter += 1
        return f"TRX{self._prefix}{self._transaction_counter:06d}"

    def generate_reference(self, prefix: str, length: int = 32) -> str:
        self._reference_counter += 1
        return f"{prefix}{self._prefix}{self._reference_counter:06d}"

    def reset(self) -> None:
        """Reinicia todos los contadores."""
        self._transaction_counter = 0
        self._reference_counter = 0
