"""Canonical pool configs, vendor adapters, and their resolution."""
from xa_datasource.datasources.adapter import VendorAdapter
from xa_datasource.datasources.assembler import DatasourceAssembler, validate_config
from xa_datasource.datasources.config import load_pool_configs
from xa_datasource.datasources.discovery import build_default_registry, discover_adapters
from xa_datasource.datasources.models import AdapterDescriptor, CanonicalPoolConfig, FieldMapping
from xa_datasource.datasources.probe import AvailabilityProbe, ImportlibProbe
from xa_datasource.datasources.registry import AdapterRegistry, validate_descriptor
from xa_datasource.datasources.transformer import PropertyMapTransformer

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
    "discover_adapters",
    "load_pool_configs",
    "validate_config",
    "validate_descriptor",
]
