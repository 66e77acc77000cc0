"""
Payment vendor providers for Pro Sites billing
"""
from .stripe_provider import StripeProvider

__all__ = [
    'StripeProvider',
]
