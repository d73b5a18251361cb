"""Shared errors, logging and settings."""
from xa_datasource.common.errors import (
    AmbiguousMappingError,
    DatasourceConfigError,
    DuplicateAdapterError,
    ErrorCode,
    InvalidAdapterError,
    InvalidConfigurationError,
    NoAvailableAdapterError,
    UnknownAdapterError,
)
from xa_datasource.common.logger import configure_logging, get_logger
from xa_datasource.common.settings import Settings, settings

__all__ = [
    "AmbiguousMappingError",
    "DatasourceConfigError",
    "DuplicateAdapterError",
    "ErrorCode",
    "InvalidAdapterError",
    "InvalidConfigurationError",
    "NoAvailableAdapterError",
    "UnknownAdapterError",
    "configure_logging",
    "get_logger",
    "Settings",
    "settings",
]
