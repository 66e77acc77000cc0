"""
Services layer for Pro Sites billing
"""

from .context import BillingContext
from .site_directory import SiteDirectory
from .customer_service import StripeCustomerService

__all__ = [
    'BillingContext',
    'SiteDirectory',
    'StripeCustomerService',
]
