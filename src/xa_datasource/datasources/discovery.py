from importlib.metadata import entry_points
from typing import List, Optional

from xa_datasource.common.logger import get_logger
from xa_datasource.common.settings import Settings, settings as default_settings
from xa_datasource.datasources.models import AdapterDescriptor
from xa_datasource.datasources.probe import AvailabilityProbe
from xa_datasource.datasources.registry import AdapterRegistry
from xa_datasource.datasources.vendors import builtin_descriptors

logger = get_logger(__name__)

ENTRY_POINT_GROUP = "xa_datasource.adapters"


def _as_descriptors(name: str, loaded) -> List[AdapterDescriptor]:
    if callable(loaded) and not isinstance(loaded, AdapterDescriptor):
        loaded = loaded()
    if isinstance(loaded, AdapterDescriptor):
        return [loaded]
    descriptors = list(loaded)
    for item in descriptors:
        if not isinstance(item, AdapterDescriptor):
            raise TypeError(f"Entry point {name} produced {type(item).__name__}, expected AdapterDescriptor")
    return descriptors


def discover_adapters() -> List[AdapterDescriptor]:
    """Discovers adapter descriptors published via 'xa_datasource.adapters' entry points.

    An entry point may reference a descriptor, an iterable of descriptors, or a
    callable returning either. Entry points that fail to load are logged and skipped.

    Returns:
        List[AdapterDescriptor]: Descriptors in entry point order.
    """
    descriptors: List[AdapterDescriptor] = []
    for ep in entry_points(group=ENTRY_POINT_GROUP):
        try:
            descriptors.extend(_as_descriptors(ep.name, ep.load()))
        except Exception as e:
            logger.error(f"Failed to load adapter {ep.name}: {e}")
    return descriptors


def build_default_registry(
    probe: Optional[AvailabilityProbe] = None,
    config: Optional[Settings] = None,
) -> AdapterRegistry:
    """
    Builds the process registry: built-in descriptors first, then plugins.

    Args:
        probe: Availability probe injected into the registry.
        config: Settings override; defaults to the module-level settings.

    Returns:
        A populated AdapterRegistry.
    """
    config = config or default_settings
    registry = AdapterRegistry(probe=probe, adapters=builtin_descriptors())
    if config.discover_plugins:
        for descriptor in discover_adapters():
            registry.register(descriptor)
    return registry
