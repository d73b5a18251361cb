from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Standardized error codes for adapter registration, resolution and assembly."""
    DUPLICATE_ADAPTER = "DUPLICATE_ADAPTER"
    AMBIGUOUS_MAPPING = "AMBIGUOUS_MAPPING"
    INVALID_ADAPTER = "INVALID_ADAPTER"
    UNKNOWN_ADAPTER = "UNKNOWN_ADAPTER"
    NO_AVAILABLE_ADAPTER = "NO_AVAILABLE_ADAPTER"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"


STARTUP_ERRORS = {
    ErrorCode.DUPLICATE_ADAPTER,
    ErrorCode.AMBIGUOUS_MAPPING,
    ErrorCode.INVALID_ADAPTER,
}


class DatasourceConfigError(Exception):
    """Base error for the datasource configuration layer.

    Attributes:
        error_code (ErrorCode): The standardized error code.
        details (Dict[str, Any]): Structured context (identifiers, keys, values).
    """

    error_code: ErrorCode = ErrorCode.INVALID_CONFIGURATION

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})

    @property
    def is_fatal_at_startup(self) -> bool:
        """Registration-time errors abort startup; nothing here is ever retried."""
        return self.error_code in STARTUP_ERRORS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details,
        }


class DuplicateAdapterError(DatasourceConfigError):
    error_code = ErrorCode.DUPLICATE_ADAPTER


class AmbiguousMappingError(DatasourceConfigError):
    error_code = ErrorCode.AMBIGUOUS_MAPPING


class InvalidAdapterError(DatasourceConfigError):
    error_code = ErrorCode.INVALID_ADAPTER


class UnknownAdapterError(DatasourceConfigError, LookupError):
    error_code = ErrorCode.UNKNOWN_ADAPTER


class NoAvailableAdapterError(DatasourceConfigError):
    error_code = ErrorCode.NO_AVAILABLE_ADAPTER


class InvalidConfigurationError(DatasourceConfigError, ValueError):
    """Raised when a canonical pool config violates an invariant.

    Attributes:
        invariant (str): Name of the violated invariant, e.g. ``url_required``.
    """

    error_code = ErrorCode.INVALID_CONFIGURATION

    def __init__(self, invariant: str, message: str, details: Optional[Dict[str, Any]] = None):
        merged = {"invariant": invariant}
        merged.update(details or {})
        super().__init__(message, merged)
        self.invariant = invariant
