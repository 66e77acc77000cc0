"""
Stripe API executor - ONLY makes payment API calls
"""
import logging
import time
from typing import Dict, Any, List, Optional

import stripe

from prosites.core.exceptions import translate_stripe_error
from prosites.core.logging import log_external_service_call

logger = logging.getLogger(__name__)

def _to_dict(obj):
    """Stripe SDK objects as plain dicts; anything else unchanged"""
    if isinstance(obj, stripe.StripeObject):
        return obj.to_dict()
    return obj

class StripeProvider:
    """
    Executes Stripe API calls only

    Every call is timed and logged. Responses come back as plain dicts,
    so they can be cached and serialized; stripe SDK errors are re-raised
    as ``prosites.core.exceptions.StripeError`` subclasses.
    """

    def __init__(self, api_key: str = None, config: Dict[str, Any] = None):
        self.config = config or {}
        self.api_key = api_key or self.config.get('STRIPE_SECRET_KEY')
        self.api_version = self.config.get('STRIPE_API_VERSION')

        if self.api_key:
            self._init_stripe()

    def _init_stripe(self):
        """Initialize Stripe client"""
        stripe.api_key = self.api_key
        if self.api_version:
            stripe.api_version = self.api_version
        logger.info("Stripe client initialized")

    def _call(self, endpoint: str, method: str, func, *args, **kwargs):
        start_time = time.time()
        try:
            response = func(*args, **kwargs)
        except Exception as e:
            error = translate_stripe_error(e, endpoint)
            log_external_service_call(
                'stripe', endpoint, method, time.time() - start_time, False,
                status_code=getattr(e, 'http_status', None), error=error.message
            )
            raise error from e

        log_external_service_call('stripe', endpoint, method, time.time() - start_time, True)
        return _to_dict(response)

    # ========== CUSTOMERS ==========

    def retrieve_customer(self, customer_id: str):
        """Execute Stripe customer retrieval API call"""
        return self._call(f'customers/{customer_id}', 'GET', stripe.Customer.retrieve, customer_id)

    def list_customers(self, email: str, limit: int) -> List[Any]:
        """Execute Stripe customer listing API call, newest first"""
        customers = self._call('customers', 'GET', stripe.Customer.list, email=email, limit=limit)
        return list(customers['data'])

    def create_customer(self, email: str, source: Optional[str] = None, **kwargs):
        """Execute Stripe customer creation API call"""
        params = dict(kwargs, email=email)
        if source:
            params['source'] = source
        return self._call('customers', 'POST', stripe.Customer.create, **params)

    def update_customer(self, customer_id: str, fields: Dict[str, Any]):
        """Execute Stripe customer update API call"""
        return self._call(f'customers/{customer_id}', 'POST', stripe.Customer.modify, customer_id, **fields)

    def delete_customer(self, customer_id: str):
        """Execute Stripe customer deletion API call"""
        return self._call(f'customers/{customer_id}', 'DELETE', stripe.Customer.delete, customer_id)

    def retrieve_source(self, customer_id: str, source_id: str):
        """Execute Stripe customer payment source retrieval API call"""
        return self._call(
            f'customers/{customer_id}/sources/{source_id}', 'GET',
            stripe.Customer.retrieve_source, customer_id, source_id
        )

    # ========== INVOICES ==========

    def list_invoices(self, customer_id: str, limit: int = 1) -> List[Any]:
        """Execute Stripe invoice listing API call, newest first"""
        invoices = self._call('invoices', 'GET', stripe.Invoice.list, customer=customer_id, limit=limit)
        return list(invoices['data'])

    def upcoming_invoice(self, customer_id: str, subscription_id: Optional[str] = None):
        """Execute Stripe invoice preview API call"""
        params = {'customer': customer_id}
        if subscription_id:
            params['subscription'] = subscription_id
        return self._call('invoices/create_preview', 'POST', stripe.Invoice.create_preview, **params)
