"""Adaptadores de liquidación por método de pago."""

from rental_core.infrastructure.gateways.boleto_gateway import BoletoSettlementGateway
from rental_core.infrastructure.gateways.credit_card_gateway import CreditCardSettlementGateway
from rental_core.infrastructure.gateways.pix_gateway import PixSettlementGateway
from rental_core.infrastructure.gateways.settlement_gateway_selector import (
    SettlementGatewaySelector,
)

__all__ = [
    "BoletoSettlementGateway",
    "CreditCardSettlementGateway",
    "PixSettlementGateway",
    "SettlementGatewaySelector",
]
