"""
Base classes for Pro Sites billing services
"""
import json
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field

from .exceptions import (
    ResourceNotFoundError, ValidationError,
    PaymentGatewayError, StripeNotFoundError, StripeValidationError,
    handle_exception
)

class ResultStatus(Enum):
    """Outcome of a service operation"""
    OK = "ok"
    NOT_FOUND = "not_found"
    VENDOR_ERROR = "vendor_error"
    VALIDATION_ERROR = "validation_error"

@dataclass
class ServiceResult:
    """
    Result of a service operation

    A failed result is falsy, so callers that only care about
    success can keep treating it as a boolean.
    """
    status: ResultStatus
    value: Any = None
    error: Optional[str] = None
    error_details: Dict[str, Any] = field(default_factory=dict)
    transient: bool = False

    @property
    def success(self) -> bool:
        return self.status is ResultStatus.OK

    @property
    def retryable(self) -> bool:
        """Only transient vendor failures are worth retrying"""
        return self.status is ResultStatus.VENDOR_ERROR and self.transient

    def __bool__(self) -> bool:
        return self.success

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'status': self.status.value,
            'value': self.value,
            'error': self.error,
            'error_details': self.error_details,
            'retryable': self.retryable,
        }

    @classmethod
    def ok(cls, value: Any) -> 'ServiceResult':
        return cls(ResultStatus.OK, value=value)

    @classmethod
    def not_found(cls, message: str, **details) -> 'ServiceResult':
        return cls(ResultStatus.NOT_FOUND, error=message, error_details=details)

    @classmethod
    def from_exception(cls, error: Exception) -> 'ServiceResult':
        """Build a failed result from any exception"""
        error = handle_exception(error)

        if isinstance(error, (StripeNotFoundError, ResourceNotFoundError)):
            status = ResultStatus.NOT_FOUND
        elif isinstance(error, (StripeValidationError, ValidationError)):
            status = ResultStatus.VALIDATION_ERROR
        else:
            status = ResultStatus.VENDOR_ERROR

        details = dict(error.details)
        details['code'] = error.code

        return cls(
            status,
            error=error.message,
            error_details=details,
            transient=isinstance(error, PaymentGatewayError) and error.transient
        )

class MessageBag:
    """
    User-visible messages collected while handling a request
    """

    def __init__(self):
        self._messages: Dict[str, List[str]] = {}

    def add(self, code: str, message: str):
        self._messages.setdefault(code, []).append(message)

    def get(self, code: str) -> List[str]:
        return list(self._messages.get(code, []))

    def has(self, code: Optional[str] = None) -> bool:
        if code is None:
            return bool(self._messages)
        return bool(self._messages.get(code))

    def clear(self):
        self._messages.clear()

    def to_dict(self) -> Dict[str, List[str]]:
        return {code: list(messages) for code, messages in self._messages.items()}

class BaseService(ABC):
    """
    Base class for all services (customers, gateways, etc.)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.service_id = str(uuid.uuid4())
        self.logger = self._get_logger()

    def _get_logger(self):
        """Get logger for the service"""
        from .logging import get_logger
        return get_logger(self.__class__.__name__)

    @abstractmethod
    def initialize(self) -> bool:
        """
        Initialize the service

        Returns:
            bool: True if initialization successful, False otherwise
        """
        pass

    def validate_config(self, required_keys: List[str]) -> bool:
        """
        Validate service configuration

        Args:
            required_keys: List of required configuration keys

        Returns:
            bool: True if configuration is valid, False otherwise
        """
        for key in required_keys:
            if not self.config.get(key):
                self.logger.error(f"Missing configuration key: {key}")
                return False
        return True

    def log_operation(self, operation: str, details: Dict[str, Any], level: str = "info"):
        """
        Log service operation

        Args:
            operation: Operation name
            details: Operation details
            level: Log level (info, warning, error, debug)
        """
        log_data = {
            'service': self.__class__.__name__,
            'service_id': self.service_id,
            'operation': operation,
            'details': details,
            'timestamp': datetime.now().isoformat()
        }

        log = getattr(self.logger, level, self.logger.info)
        log(json.dumps(log_data, default=str))

    def handle_service_error(self, error: Exception, operation: str = "") -> ServiceResult:
        """
        Log a failed operation and turn it into a failed result

        Args:
            error: Exception that occurred
            operation: Operation that failed

        Returns:
            ServiceResult: Failed result
        """
        result = ServiceResult.from_exception(error)

        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'status': result.status.value,
            'operation': operation,
            'service': self.__class__.__name__,
            'timestamp': datetime.now().isoformat()
        }

        if result.status is ResultStatus.NOT_FOUND:
            self.logger.info(json.dumps(error_details, default=str))
        else:
            self.logger.error(json.dumps(error_details, default=str))

        return result
