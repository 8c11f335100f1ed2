from rental_core.application.interfaces.settlement_gateway import SettlementGateway
from rental_core.domain.entities.payment import PaymentMethod


class SettlementGatewaySelector:
    def __init__(
        self,
        default_gateway: SettlementGateway,
        mapping: dict[PaymentMethod, SettlementGateway] | None = None,
    ):
        self._default = default_gateway
        self._mapping = mapping or {}

    def register(self, method: PaymentMethod, gateway: SettlementGateway) -> None:
        self._mapping[method] = gateway

    def for_method(self, method: PaymentMethod | None) -> SettlementGateway:
        # Pagos sin método elegido (p.ej. completados por señal directa) usan el default
        if method is None:
            return self._default
        return self._mapping.get(method, self._default)
