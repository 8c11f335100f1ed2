from rental_core.infrastructure.gateways.in_memory.settlement_gateway import StubSettlementGateway

__all__ = ["StubSettlementGateway"]
