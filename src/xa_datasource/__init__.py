# xa_datasource package

from .datasources import (
    AdapterDescriptor,
    AdapterRegistry,
    AvailabilityProbe,
    CanonicalPoolConfig,
    DatasourceAssembler,
    FieldMapping,
    ImportlibProbe,
    PropertyMapTransformer,
    VendorAdapter,
    build_default_registry,
    load_pool_configs,
)
from .common.errors import (
    AmbiguousMappingError,
    DatasourceConfigError,
    DuplicateAdapterError,
    ErrorCode,
    InvalidAdapterError,
    InvalidConfigurationError,
    NoAvailableAdapterError,
    UnknownAdapterError,
)

__all__ = [
    "AdapterDescriptor",
    "AdapterRegistry",
    "AvailabilityProbe",
    "CanonicalPoolConfig",
    "DatasourceAssembler",
    "FieldMapping",
    "ImportlibProbe",
    "PropertyMapTransformer",
    "VendorAdapter",
    "build_default_registry",
    "load_pool_configs",
    "AmbiguousMappingError",
    "DatasourceConfigError",
    "DuplicateAdapterError",
    "ErrorCode",
    "InvalidAdapterError",
    "InvalidConfigurationError",
    "NoAvailableAdapterError",
    "UnknownAdapterError",
]
