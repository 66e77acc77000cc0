"""
Manual payments gateway (bank transfer, cheque, ...)
"""
from prosites.core.constants import CURRENCIES
from .base import BaseGateway

class ManualGateway(BaseGateway):
    key = 'manual'
    display_name = 'Manual Payments'

    @classmethod
    def get_supported_currencies(cls):
        # Settled outside of any processor, so any currency works
        return list(CURRENCIES)
