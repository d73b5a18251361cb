from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from xa_datasource.common.errors import InvalidConfigurationError
from xa_datasource.common.logger import get_logger
from xa_datasource.common.settings import Settings, settings as default_settings
from xa_datasource.datasources.adapter import VendorAdapter
from xa_datasource.datasources.models import CanonicalPoolConfig
from xa_datasource.datasources.registry import AdapterRegistry

logger = get_logger(__name__)


def validate_config(config: CanonicalPoolConfig) -> None:
    """
    Checks the invariants a config must hold before it is translated.

    Raises:
        InvalidConfigurationError: Names the first violated invariant.
    """
    if not config.url or not config.url.strip():
        raise InvalidConfigurationError("url_required", "Pool config url must not be empty")

    max_pool_size = config.max_pool_size
    min_idle = config.min_idle

    if max_pool_size is not None and max_pool_size <= 0:
        raise InvalidConfigurationError(
            "max_pool_size_positive",
            f"max_pool_size must be positive, got {max_pool_size}",
            {"max_pool_size": max_pool_size},
        )
    if min_idle is not None and min_idle < 0:
        raise InvalidConfigurationError(
            "min_idle_non_negative",
            f"min_idle must not be negative, got {min_idle}",
            {"min_idle": min_idle},
        )
    if config.connection_timeout_ms is not None and config.connection_timeout_ms < 0:
        raise InvalidConfigurationError(
            "connection_timeout_non_negative",
            f"connection_timeout_ms must not be negative, got {config.connection_timeout_ms}",
            {"connection_timeout_ms": config.connection_timeout_ms},
        )
    if min_idle is not None and max_pool_size is not None and min_idle > max_pool_size:
        raise InvalidConfigurationError(
            "min_idle_within_max_pool_size",
            f"min_idle ({min_idle}) must not exceed max_pool_size ({max_pool_size})",
            {"min_idle": min_idle, "max_pool_size": max_pool_size},
        )


class DatasourceAssembler:
    """
    Entry point for turning a canonical config into a ready-to-construct
    vendor property map. Building the pool object itself is left to the caller.
    """

    def __init__(self, registry: AdapterRegistry, config: Optional[Settings] = None):
        self._registry = registry
        self._settings = config or default_settings

    @property
    def registry(self) -> AdapterRegistry:
        return self._registry

    def assemble(self, model: CanonicalPoolConfig, adapter: VendorAdapter) -> Dict[str, Any]:
        """
        Validates ``model`` and returns ``adapter``'s property map for it.

        Raises:
            InvalidConfigurationError: If an invariant is violated.
        """
        validate_config(model)
        return adapter.to_vendor_properties(model)

    def assemble_for(self, model: CanonicalPoolConfig, identifier: Optional[str] = None) -> Dict[str, Any]:
        """Resolves the adapter (explicit, preferred, then available) and assembles."""
        return self.assemble(model, self.resolve(identifier))

    def resolve(self, identifier: Optional[str] = None) -> VendorAdapter:
        target = identifier or self._settings.preferred_adapter
        if target:
            return self._registry.resolve_by_identifier(target)
        return self._registry.resolve_available()

    def migrate(
        self,
        vendor_properties: Mapping[str, Any],
        source: VendorAdapter,
        target: VendorAdapter,
    ) -> Dict[str, Any]:
        """
        Re-expresses one pool implementation's property map for another.

        Keys still holding the source adapter's defaults are not carried over;
        the target applies its own defaults instead.
        """
        model = source.to_canonical_model(vendor_properties, drop_defaults=True)
        logger.info(
            f"Migrating pool config from {source.implementation_identifier()} "
            f"to {target.implementation_identifier()}"
        )
        return self.assemble(model, target)
