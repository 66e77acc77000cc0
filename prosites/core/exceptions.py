"""
Custom exceptions for Pro Sites billing
"""
from typing import Any


class ProSitesError(Exception):
    """Base exception for all Pro Sites billing errors"""

    def __init__(self, message: str = "An error occurred in Pro Sites billing",
                 code: str = "INTERNAL_ERROR", status_code: int = 500,
                 details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API responses"""
        return {
            'error': {
                'code': self.code,
                'message': self.message,
                'details': self.details
            }
        }

# ========== VALIDATION ERRORS ==========

class ValidationError(ProSitesError):
    """Validation error"""

    def __init__(self, message: str = "Validation error",
                 field: str = None, value: Any = None,
                 details: dict = None):
        if field:
            message = f"Validation error for field '{field}': {message}"
            if value is not None:
                message = f"{message} (value: {value})"

        details = details or {}
        if field:
            details['field'] = field
        if value is not None:
            details['value'] = value

        super().__init__(message, "VALIDATION_ERROR", 400, details)

# ========== LOOKUP ERRORS ==========

class ResourceNotFoundError(ProSitesError):
    """Resource not found error"""

    def __init__(self, message: str = "Resource not found",
                 resource_type: str = None, resource_id: str = None,
                 details: dict = None):
        if resource_type and resource_id:
            message = f"{resource_type} with ID '{resource_id}' not found"

        details = details or {}
        if resource_type:
            details['resource_type'] = resource_type
        if resource_id:
            details['resource_id'] = resource_id

        super().__init__(message, "RESOURCE_NOT_FOUND", 404, details)

# ========== DATABASE ERRORS ==========

class DatabaseError(ProSitesError):
    """Database error"""

    def __init__(self, message: str = "Database error",
                 operation: str = None, table: str = None,
                 details: dict = None):
        if operation and table:
            message = f"Database error during {operation} on table '{table}': {message}"

        details = details or {}
        if operation:
            details['operation'] = operation
        if table:
            details['table'] = table

        super().__init__(message, "DATABASE_ERROR", 500, details)

# ========== EXTERNAL SERVICE ERRORS ==========

class ExternalServiceError(ProSitesError):
    """External service error"""

    def __init__(self, message: str = "External service error",
                 service: str = None, endpoint: str = None,
                 status_code: int = None, details: dict = None):
        if service:
            message = f"{service} service error: {message}"

        details = details or {}
        if service:
            details['service'] = service
        if endpoint:
            details['endpoint'] = endpoint
        if status_code:
            details['status_code'] = status_code

        super().__init__(message, "EXTERNAL_SERVICE_ERROR", 502, details)

class PaymentGatewayError(ExternalServiceError):
    """Payment gateway error

    ``transient`` marks failures that may succeed when retried later
    (network trouble, rate limiting, vendor outages).
    """

    def __init__(self, message: str = "Payment gateway error",
                 gateway: str = None, endpoint: str = None,
                 status_code: int = None, transient: bool = False,
                 details: dict = None):
        super().__init__(message, gateway or "Payment gateway", endpoint, status_code, details)
        self.code = "PAYMENT_GATEWAY_ERROR"
        self.transient = transient

class StripeError(PaymentGatewayError):
    """Stripe API error"""

    def __init__(self, message: str = "Stripe API error",
                 endpoint: str = None, status_code: int = None,
                 transient: bool = False, details: dict = None):
        super().__init__(message, "Stripe", endpoint, status_code, transient, details)
        self.code = "STRIPE_ERROR"

class StripeNotFoundError(StripeError):
    """Requested Stripe object does not exist"""

    def __init__(self, message: str = "No such Stripe object",
                 endpoint: str = None, details: dict = None):
        super().__init__(message, endpoint, 404, False, details)
        self.code = "STRIPE_NOT_FOUND"
        self.status_code = 404

class StripeValidationError(StripeError):
    """Stripe rejected the request parameters"""

    def __init__(self, message: str = "Invalid Stripe request",
                 endpoint: str = None, status_code: int = None,
                 details: dict = None):
        super().__init__(message, endpoint, status_code, False, details)
        self.code = "STRIPE_VALIDATION_ERROR"
        self.status_code = 400

# ========== CONFIGURATION ERRORS ==========

class ConfigurationError(ProSitesError):
    """Configuration error"""

    def __init__(self, message: str = "Configuration error",
                 config_key: str = None, details: dict = None):
        if config_key:
            message = f"Configuration error for key '{config_key}': {message}"

        details = details or {}
        if config_key:
            details['config_key'] = config_key

        super().__init__(message, "CONFIGURATION_ERROR", 500, details)

class MissingConfigurationError(ConfigurationError):
    """Missing configuration error"""

    def __init__(self, message: str = "Missing configuration",
                 config_key: str = None, details: dict = None):
        super().__init__(message, config_key, details)
        if config_key:
            self.message = f"Missing required configuration: {config_key}"
            self.args = (self.message,)
        self.code = "MISSING_CONFIGURATION"

# ========== UTILITY FUNCTIONS ==========

def translate_stripe_error(error: Exception, endpoint: str = None) -> ProSitesError:
    """
    Convert an exception raised by the stripe SDK into a ProSitesError

    Args:
        error: Exception raised by a stripe call
        endpoint: Stripe endpoint that was called

    Returns:
        ProSitesError: Converted exception
    """
    import stripe

    if isinstance(error, ProSitesError):
        return error

    message = getattr(error, 'user_message', None) or str(error)
    http_status = getattr(error, 'http_status', None)
    details = {}
    if getattr(error, 'code', None):
        details['stripe_code'] = error.code
    if getattr(error, 'request_id', None):
        details['request_id'] = error.request_id

    if isinstance(error, stripe.InvalidRequestError):
        if http_status == 404 or getattr(error, 'code', None) == 'resource_missing':
            return StripeNotFoundError(message, endpoint, details)
        return StripeValidationError(message, endpoint, http_status, details)
    elif isinstance(error, stripe.CardError):
        return StripeValidationError(message, endpoint, http_status, details)
    elif isinstance(error, (stripe.APIConnectionError, stripe.RateLimitError)):
        return StripeError(message, endpoint, http_status, True, details)
    elif isinstance(error, (stripe.AuthenticationError, stripe.PermissionError)):
        return StripeError(message, endpoint, http_status, False, details)
    elif isinstance(error, stripe.StripeError):
        # Generic API errors are 5xx on Stripe's side
        return StripeError(message, endpoint, http_status, True, details)
    else:
        return handle_exception(error)

def handle_exception(error: Exception) -> ProSitesError:
    """
    Convert generic exceptions to ProSitesError

    Args:
        error: Exception to convert

    Returns:
        ProSitesError: Converted exception
    """
    if isinstance(error, ProSitesError):
        return error

    if isinstance(error, ValueError):
        return ValidationError(str(error))
    elif isinstance(error, TypeError):
        return ValidationError(f"Type error: {str(error)}")
    elif isinstance(error, KeyError):
        return ValidationError(f"Missing key: {str(error)}")
    elif isinstance(error, ConnectionError):
        return ExternalServiceError(f"Connection error: {str(error)}")
    elif isinstance(error, TimeoutError):
        return ExternalServiceError(f"Timeout error: {str(error)}")
    else:
        return ProSitesError(f"Unexpected error: {str(error)}")
