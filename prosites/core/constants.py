"""
Constants for Pro Sites billing
"""
from enum import Enum

# ========== CACHE ==========
DEFAULT_CACHE_GROUP = 'psts'

class CacheKind(Enum):
    CUSTOMER = 'customer'
    LIST_CUSTOMERS = 'list_customers'
    DEFAULT_CARD = 'default_card'
    LAST_INVOICE = 'last_invoice'
    UPCOMING_INVOICE = 'upcoming_invoice'
    DB_CUSTOMER = 'db_customer'

# ========== SITES ==========
DEFAULT_MAIN_SITE_ID = 1

# ========== GATEWAYS ==========
TRIAL_GATEWAY_KEY = 'trial'
TRIAL_GATEWAY_LABEL = 'Trial'

DEFAULT_GATEWAYS_ENABLED = [
    'prosites.gateways.stripe_gateway.StripeGateway',
]

# ========== STRIPE ==========
STRIPE_CUSTOMER_LIST_LIMIT = 10
STRIPE_CUSTOMER_CREATE_FAILED = 'The Stripe customer could not be created. Please try again.'

# ========== CURRENCIES ==========
# ISO 4217 codes; ``supported_by`` is filled in from the enabled gateways
CURRENCIES = {
    'AUD': {'name': 'Australian Dollar', 'symbol': '$', 'supported_by': []},
    'BRL': {'name': 'Brazilian Real', 'symbol': 'R$', 'supported_by': []},
    'CAD': {'name': 'Canadian Dollar', 'symbol': '$', 'supported_by': []},
    'CHF': {'name': 'Swiss Franc', 'symbol': 'CHF', 'supported_by': []},
    'CZK': {'name': 'Czech Koruna', 'symbol': 'Kč', 'supported_by': []},
    'DKK': {'name': 'Danish Krone', 'symbol': 'kr', 'supported_by': []},
    'EUR': {'name': 'Euro', 'symbol': '€', 'supported_by': []},
    'GBP': {'name': 'Pound Sterling', 'symbol': '£', 'supported_by': []},
    'HKD': {'name': 'Hong Kong Dollar', 'symbol': '$', 'supported_by': []},
    'INR': {'name': 'Indian Rupee', 'symbol': '₹', 'supported_by': []},
    'JPY': {'name': 'Japanese Yen', 'symbol': '¥', 'supported_by': []},
    'MXN': {'name': 'Mexican Peso', 'symbol': '$', 'supported_by': []},
    'NOK': {'name': 'Norwegian Krone', 'symbol': 'kr', 'supported_by': []},
    'NZD': {'name': 'New Zealand Dollar', 'symbol': '$', 'supported_by': []},
    'PLN': {'name': 'Polish Zloty', 'symbol': 'zł', 'supported_by': []},
    'SEK': {'name': 'Swedish Krona', 'symbol': 'kr', 'supported_by': []},
    'SGD': {'name': 'Singapore Dollar', 'symbol': '$', 'supported_by': []},
    'USD': {'name': 'US Dollar', 'symbol': '$', 'supported_by': []},
    'ZAR': {'name': 'South African Rand', 'symbol': 'R', 'supported_by': []},
}
