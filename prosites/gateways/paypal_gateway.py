"""
PayPal Express gateway
"""
from .base import BaseGateway

class PayPalGateway(BaseGateway):
    key = 'paypal'
    display_name = 'PayPal Express'
    # PayPal does not settle INR or ZAR for most merchant accounts
    currencies = [
        'AUD', 'BRL', 'CAD', 'CHF', 'CZK', 'DKK', 'EUR', 'GBP', 'HKD',
        'JPY', 'MXN', 'NOK', 'NZD', 'PLN', 'SEK', 'SGD', 'USD',
    ]
