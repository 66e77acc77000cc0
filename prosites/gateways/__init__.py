"""
Payment gateways available to the network
"""
from .base import BaseGateway
from .stripe_gateway import StripeGateway
from .paypal_gateway import PayPalGateway
from .manual_gateway import ManualGateway
from .registry import GatewayInfo, GatewayRegistry

__all__ = [
    'BaseGateway',
    'StripeGateway',
    'PayPalGateway',
    'ManualGateway',
    'GatewayInfo',
    'GatewayRegistry',
]
