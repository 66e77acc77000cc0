"""
Core module with base classes and utilities
"""
from .base import BaseService, MessageBag, ResultStatus, ServiceResult
from .exceptions import (
    ProSitesError, ValidationError, ResourceNotFoundError, DatabaseError,
    ExternalServiceError, PaymentGatewayError, StripeError,
    StripeNotFoundError, StripeValidationError,
    ConfigurationError, MissingConfigurationError,
    translate_stripe_error
)
from .logging import setup_logging, get_logger, log_external_service_call, log_database_operation

__all__ = [
    # Base classes
    'BaseService', 'MessageBag', 'ResultStatus', 'ServiceResult',

    # Exceptions
    'ProSitesError', 'ValidationError', 'ResourceNotFoundError', 'DatabaseError',
    'ExternalServiceError', 'PaymentGatewayError', 'StripeError',
    'StripeNotFoundError', 'StripeValidationError',
    'ConfigurationError', 'MissingConfigurationError',
    'translate_stripe_error',

    # Logging
    'setup_logging', 'get_logger', 'log_external_service_call', 'log_database_operation',
]
