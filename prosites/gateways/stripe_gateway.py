"""
Stripe gateway
"""
from .base import BaseGateway

class StripeGateway(BaseGateway):
    key = 'stripe'
    display_name = 'Stripe'
    currencies = [
        'AUD', 'BRL', 'CAD', 'CHF', 'CZK', 'DKK', 'EUR', 'GBP', 'HKD', 'INR',
        'JPY', 'MXN', 'NOK', 'NZD', 'PLN', 'SEK', 'SGD', 'USD', 'ZAR',
    ]
