import json
import logging

import pytest

from xa_datasource.common.errors import (
    AmbiguousMappingError,
    DatasourceConfigError,
    DuplicateAdapterError,
    ErrorCode,
    InvalidConfigurationError,
    NoAvailableAdapterError,
    UnknownAdapterError,
)
from xa_datasource.common.logger import JsonFormatter, configure_logging, get_logger


@pytest.mark.parametrize(
    "error_cls, code, fatal",
    [
        (DuplicateAdapterError, ErrorCode.DUPLICATE_ADAPTER, True),
        (AmbiguousMappingError, ErrorCode.AMBIGUOUS_MAPPING, True),
        (UnknownAdapterError, ErrorCode.UNKNOWN_ADAPTER, False),
        (NoAvailableAdapterError, ErrorCode.NO_AVAILABLE_ADAPTER, False),
    ],
)
def test_error_codes_and_startup_severity(error_cls, code, fatal):
    error = error_cls("boom", {"implementation_identifier": "a.Pool"})

    assert isinstance(error, DatasourceConfigError)
    assert error.error_code == code
    assert error.is_fatal_at_startup is fatal
    assert error.to_dict() == {
        "error_code": code.value,
        "message": "boom",
        "details": {"implementation_identifier": "a.Pool"},
    }


def test_invalid_configuration_error_carries_invariant():
    error = InvalidConfigurationError("url_required", "Pool config url must not be empty")

    assert error.invariant == "url_required"
    assert error.details == {"invariant": "url_required"}
    assert str(error) == "Pool config url must not be empty"


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("xa_datasource.test", logging.WARNING, __file__, 1, "collision on %s", ("k",), None)
    record.vendor_key = "maximumPoolSize"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["message"] == "collision on k"
    assert payload["vendor_key"] == "maximumPoolSize"


def test_configure_logging_replaces_handlers():
    target = logging.getLogger("xa_datasource.test_configure")
    try:
        configure_logging("DEBUG", json_format=True, logger_name="xa_datasource.test_configure")
        configure_logging("DEBUG", json_format=True, logger_name="xa_datasource.test_configure")

        assert len(target.handlers) == 1
        assert isinstance(target.handlers[0].formatter, JsonFormatter)
        assert target.level == logging.DEBUG
    finally:
        for handler in target.handlers[:]:
            target.removeHandler(handler)
        target.setLevel(logging.NOTSET)


def test_get_logger_returns_named_logger():
    assert get_logger("xa_datasource.datasources").name == "xa_datasource.datasources"
