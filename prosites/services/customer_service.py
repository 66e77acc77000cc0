"""
Stripe customer management for Pro Sites

Maps sites of the network to Stripe customers. Stripe responses are kept
in the application cache (cache-aside, best effort, never authoritative)
and the site -> customer/subscription mapping lives in the
``pro_sites_stripe_customers`` table.
"""

import time
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from prosites.app.models import StripeCustomer, TenantBinding
from prosites.core.base import BaseService, ServiceResult
from prosites.core.constants import (
    CacheKind, STRIPE_CUSTOMER_LIST_LIMIT, STRIPE_CUSTOMER_CREATE_FAILED
)
from prosites.core.exceptions import DatabaseError, ProSitesError, ValidationError
from prosites.core.logging import log_database_operation
from prosites.providers.stripe_provider import StripeProvider
from .context import BillingContext

class StripeCustomerService(BaseService):
    """
    Resolves, creates and updates the Stripe customers of sites
    """

    def __init__(self, context: BillingContext, provider: Optional[StripeProvider] = None):
        super().__init__(context.config)
        self.context = context
        self.provider = provider or StripeProvider(config=context.config)

    def initialize(self) -> bool:
        """Check that Stripe is configured"""
        return self.validate_config(['STRIPE_SECRET_KEY'])

    # ========== CACHE ==========

    def _cache_key(self, kind: CacheKind, identifier: Any) -> str:
        return f"{self.context.cache_group}:stripe_{kind.value}:{identifier}"

    def _cache_get(self, kind: CacheKind, identifier: Any):
        return self.context.cache.get(self._cache_key(kind, identifier))

    def _cache_set(self, kind: CacheKind, identifier: Any, value: Any):
        self.context.cache.set(self._cache_key(kind, identifier), value)

    def _cache_delete(self, kind: CacheKind, identifier: Any):
        self.context.cache.delete(self._cache_key(kind, identifier))

    # ========== STRIPE CUSTOMERS ==========

    def get_customer(self, customer_id: str, force: bool = False) -> ServiceResult:
        """
        Retrieve a Stripe customer

        Args:
            customer_id: Stripe customer ID
            force: Skip the cache and ask Stripe

        Returns:
            ServiceResult: The customer object on success
        """
        if not customer_id:
            return ServiceResult.not_found("No Stripe customer ID given")

        if not force:
            customer = self._cache_get(CacheKind.CUSTOMER, customer_id)
            if customer:
                return ServiceResult.ok(customer)

        try:
            customer = self.provider.retrieve_customer(customer_id)
        except ProSitesError as e:
            return self.handle_service_error(e, 'get_customer')

        # Deleted customers can still be retrieved, as tombstones
        if not customer or customer.get('deleted'):
            return ServiceResult.not_found(f"Stripe customer {customer_id} not found", customer_id=customer_id)

        self._cache_set(CacheKind.CUSTOMER, customer_id, customer)
        return ServiceResult.ok(customer)

    def list_customers(self, email: str, limit: int = STRIPE_CUSTOMER_LIST_LIMIT,
                       force: bool = False) -> ServiceResult:
        """
        List Stripe customers with the given email, most recent first

        When ``limit`` is 1 the result value is the customer itself rather
        than a list, and that customer is also cached on its own.

        Args:
            email: Email address to search for
            limit: Maximum number of customers
            force: Skip the cache and ask Stripe

        Returns:
            ServiceResult: List of customers, or a single customer
        """
        identifier = f"{email}:{limit}"
        customers = None

        if not force:
            customers = self._cache_get(CacheKind.LIST_CUSTOMERS, identifier)

        if not customers:
            try:
                customers = self.provider.list_customers(email, limit)
            except ProSitesError as e:
                return self.handle_service_error(e, 'list_customers')

            if customers:
                self._cache_set(CacheKind.LIST_CUSTOMERS, identifier, customers)

        if not customers:
            return ServiceResult.not_found(f"No Stripe customers for {email}", email=email)

        customers = list(customers)[:limit]

        if limit == 1:
            customer = customers[0]
            self._cache_set(CacheKind.CUSTOMER, customer['id'], customer)
            return ServiceResult.ok(customer)

        return ServiceResult.ok(customers)

    def create_customer(self, email: str, source: Optional[str] = None,
                        check_existing: bool = False) -> ServiceResult:
        """
        Create a Stripe customer for an email address

        The description is the main site name, extended with the user's
        display name when a user with that email exists.

        Args:
            email: Email address
            source: Payment source token
            check_existing: Reuse the newest customer with the same email if any

        Returns:
            ServiceResult: The customer object on success
        """
        if not email:
            return ServiceResult.from_exception(ValidationError("Email is required", field='email'))

        if check_existing:
            existing = self.list_customers(email, 1)
            if existing:
                return existing

        sites = self.context.sites
        site_name = sites.get_blog_name(sites.main_site_id)
        params: Dict[str, Any] = {'description': site_name}

        user = sites.get_user_by_email(email)
        if user is not None:
            params['description'] = f"{site_name} user - {user.display_name or user.user_login}"
            params['metadata'] = {'user': user.user_login}

        try:
            customer = self.provider.create_customer(email, source, **params)
        except ProSitesError as e:
            self.context.errors.add('stripe', STRIPE_CUSTOMER_CREATE_FAILED)
            return self.handle_service_error(e, 'create_customer')

        self._cache_set(CacheKind.CUSTOMER, customer['id'], customer)
        self.log_operation('create_customer', {'customer_id': customer['id'], 'email': email})

        return ServiceResult.ok(customer)

    def update_customer(self, customer_id: str, fields: Dict[str, Any]) -> ServiceResult:
        """
        Update fields of a Stripe customer

        Only fields Stripe accepts on customer update can be sent.

        Args:
            customer_id: Stripe customer ID
            fields: Field name -> new value

        Returns:
            ServiceResult: The updated customer, or the current one if
            ``fields`` is empty
        """
        current = self.get_customer(customer_id)
        if not current or not fields:
            return current

        try:
            customer = self.provider.update_customer(customer_id, dict(fields))
        except ProSitesError as e:
            return self.handle_service_error(e, 'update_customer')

        self._cache_set(CacheKind.CUSTOMER, customer_id, customer)
        self.log_operation('update_customer', {'customer_id': customer_id, 'fields': sorted(fields)})

        return ServiceResult.ok(customer)

    def delete_customer(self, customer_id: str) -> ServiceResult:
        """
        Permanently delete a Stripe customer

        Stripe cancels the customer's active subscriptions immediately.
        The site binding is kept.

        Args:
            customer_id: Stripe customer ID

        Returns:
            ServiceResult: Stripe's deletion confirmation
        """
        current = self.get_customer(customer_id)
        if not current:
            return current

        try:
            deleted = self.provider.delete_customer(customer_id)
        except ProSitesError as e:
            return self.handle_service_error(e, 'delete_customer')

        self._cache_delete(CacheKind.CUSTOMER, customer_id)
        self.log_operation('delete_customer', {'customer_id': customer_id}, level='warning')

        return ServiceResult.ok(deleted)

    def default_card(self, customer_id: str, force: bool = False) -> ServiceResult:
        """Get the default payment source of a customer"""
        if not force:
            card = self._cache_get(CacheKind.DEFAULT_CARD, customer_id)
            if card:
                return ServiceResult.ok(card)

        customer = self.get_customer(customer_id, force)
        if not customer:
            return customer

        source_id = customer.value.get('default_source')
        if source_id and not isinstance(source_id, str):
            # expanded source object
            source_id = source_id.get('id')
        if not source_id:
            return ServiceResult.not_found(
                f"Stripe customer {customer_id} has no default payment source",
                customer_id=customer_id
            )

        try:
            card = self.provider.retrieve_source(customer_id, source_id)
        except ProSitesError as e:
            return self.handle_service_error(e, 'default_card')

        self._cache_set(CacheKind.DEFAULT_CARD, customer_id, card)
        return ServiceResult.ok(card)

    def last_invoice(self, customer_id: str, force: bool = False) -> ServiceResult:
        """Get the most recent invoice of a customer"""
        if not force:
            invoice = self._cache_get(CacheKind.LAST_INVOICE, customer_id)
            if invoice:
                return ServiceResult.ok(invoice)

        try:
            invoices = self.provider.list_invoices(customer_id, limit=1)
        except ProSitesError as e:
            return self.handle_service_error(e, 'last_invoice')

        if not invoices:
            return ServiceResult.not_found(f"No invoices for Stripe customer {customer_id}", customer_id=customer_id)

        invoice = invoices[0]
        self._cache_set(CacheKind.LAST_INVOICE, customer_id, invoice)
        return ServiceResult.ok(invoice)

    def upcoming_invoice(self, customer_id: str, force: bool = False,
                         subscription_id: Optional[str] = None) -> ServiceResult:
        """Get the projected next invoice of a customer"""
        if not force:
            invoice = self._cache_get(CacheKind.UPCOMING_INVOICE, customer_id)
            if invoice:
                return ServiceResult.ok(invoice)

        try:
            invoice = self.provider.upcoming_invoice(customer_id, subscription_id)
        except ProSitesError as e:
            return self.handle_service_error(e, 'upcoming_invoice')

        if not invoice:
            return ServiceResult.not_found(f"No upcoming invoice for Stripe customer {customer_id}", customer_id=customer_id)

        self._cache_set(CacheKind.UPCOMING_INVOICE, customer_id, invoice)
        return ServiceResult.ok(invoice)

    # ========== SITE BINDINGS ==========

    def set_blog_customer(self, email: str, blog_id: Optional[int] = None,
                          token: Optional[str] = None, persist: bool = False) -> ServiceResult:
        """
        Get the Stripe customer of a site, creating one when a token is given

        Args:
            email: Email address of the site owner
            blog_id: Site ID; without it the owner's sites are searched by email
            token: Payment source token used to create a missing customer
            persist: Store a newly created customer ID for the site

        Returns:
            ServiceResult: The customer object on success
        """
        if blog_id:
            binding = self.get_db_customer(blog_id)
        else:
            binding = self.get_db_customer(email=email)

        if binding.has_customer:
            return self.get_customer(binding.customer_id)

        if not token:
            return ServiceResult.not_found("Site has no Stripe customer", blog_id=blog_id, email=email)

        result = self.create_customer(email, token, check_existing=True)

        target_blog_id = blog_id or binding.blog_id
        if result and persist and target_blog_id:
            self.set_db_customer(target_blog_id, result.value['id'], binding.subscription_id or '')

        return result

    def get_db_customer(self, blog_id: Optional[int] = None, email: Optional[str] = None,
                        force: bool = False) -> TenantBinding:
        """
        Get the stored Stripe IDs of a site

        Prefer ``blog_id``: looking up by email walks every site of the user.
        Without either, the current site is used.

        Args:
            blog_id: Site ID
            email: Email of the site owner, used when no site ID is given
            force: Skip the cache

        Returns:
            TenantBinding: Empty (no customer, no subscription) when nothing is stored
        """
        if not blog_id and email:
            return self._get_db_customer_by_email(email, force)

        blog_id = int(blog_id or self.context.sites.current_blog_id())

        if not force:
            binding = self._cache_get(CacheKind.DB_CUSTOMER, blog_id)
            if binding:
                return binding

        try:
            row = self.context.session.get(StripeCustomer, blog_id)
        except SQLAlchemyError as e:
            self.context.session.rollback()
            self.handle_service_error(
                DatabaseError(str(e), 'select', StripeCustomer.__tablename__), 'get_db_customer'
            )
            row = None

        if row is None:
            return TenantBinding.empty(blog_id)

        binding = row.to_binding()
        self._cache_set(CacheKind.DB_CUSTOMER, blog_id, binding)
        return binding

    def _get_db_customer_by_email(self, email: str, force: bool = False) -> TenantBinding:
        sites = self.context.sites
        user = sites.get_user_by_email(email)

        if user is not None:
            for site in sites.get_blogs_of_user(user.id):
                # The main site never carries a subscription
                if sites.is_main_site(site.id):
                    continue

                binding = self.get_db_customer(site.id, force=force)
                if binding.has_customer:
                    return binding

        return TenantBinding.empty(None)

    def get_customer_by_blog(self, blog_id: int, force: bool = False) -> ServiceResult:
        """Get the Stripe customer stored for a site"""
        binding = self.get_db_customer(blog_id)

        if not binding.has_customer:
            return ServiceResult.not_found(f"Site {blog_id} has no Stripe customer", blog_id=blog_id)

        return self.get_customer(binding.customer_id, force)

    def set_db_customer(self, blog_id: int, customer_id: str, subscription_id: str = '') -> bool:
        """
        Store the Stripe customer and subscription IDs of a site

        Can be called with just the customer first and again once the
        subscription exists; the row is overwritten each time.

        Args:
            blog_id: Site ID
            customer_id: Stripe customer ID
            subscription_id: Stripe subscription ID

        Returns:
            bool: True if stored
        """
        if not blog_id:
            return False

        blog_id = int(blog_id)
        subscription_id = subscription_id or ''
        table = StripeCustomer.__tablename__
        start_time = time.time()

        try:
            self.context.session.merge(StripeCustomer(
                blog_id=blog_id,
                customer_id=customer_id,
                subscription_id=subscription_id
            ))
            self.context.session.commit()
        except SQLAlchemyError as e:
            self.context.session.rollback()
            log_database_operation('upsert', table, time.time() - start_time, False, error=str(e))
            self.handle_service_error(DatabaseError(str(e), 'upsert', table), 'set_db_customer')
            return False

        log_database_operation('upsert', table, time.time() - start_time, True, rows_affected=1)

        self._cache_set(
            CacheKind.DB_CUSTOMER, blog_id,
            TenantBinding(blog_id=blog_id, customer_id=customer_id or None, subscription_id=subscription_id)
        )
        return True
