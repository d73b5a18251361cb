from __future__ import annotations

from typing import Any, Dict, List, Mapping

from xa_datasource.common.logger import get_logger
from xa_datasource.datasources.models import AdapterDescriptor, CanonicalPoolConfig
from xa_datasource.datasources.transformer import PropertyMapTransformer

logger = get_logger(__name__)


class VendorAdapter:
    """
    Translates between ``CanonicalPoolConfig`` and one pool implementation's
    property map.

    All vendor knowledge lives in the ``AdapterDescriptor``; this class is the
    single engine that interprets it. Supporting a new pool library means adding
    a descriptor, not a subclass.
    """

    def __init__(self, descriptor: AdapterDescriptor):
        self._descriptor = descriptor

    @property
    def descriptor(self) -> AdapterDescriptor:
        return self._descriptor

    @property
    def priority(self) -> int:
        return self._descriptor.priority

    def implementation_identifier(self) -> str:
        """Fully-qualified name of the pool implementation this adapter targets."""
        return self._descriptor.implementation_identifier

    def to_vendor_properties(self, config: CanonicalPoolConfig) -> Dict[str, Any]:
        """
        Builds a fresh vendor property map from a canonical config.

        Steps, in order: declared field mappings, defaults for keys the mappings
        left unset, then passthrough ``extra_properties``. A passthrough value
        replaces a default but never a mapped key; such a collision is logged and
        the mapped value wins. Set canonical fields without a mapping are dropped
        with a warning.

        Args:
            config: The canonical config. It is never mutated.

        Returns:
            A new dict shaped for the target pool implementation.
        """
        identifier = self.implementation_identifier()
        values = config.mapped_values()
        mapped_canonical = {m.canonical_key for m in self._descriptor.field_mappings}

        transformer = PropertyMapTransformer(values)
        for key in values:
            if key not in mapped_canonical:
                logger.warning(
                    f"Canonical field '{key}' has no mapping for {identifier}; dropping it",
                    extra={"canonical_key": key, "implementation_identifier": identifier},
                )
                transformer.drop(key)

        populated: List[str] = []
        for mapping in self._descriptor.field_mappings:
            if transformer.transfer(mapping.canonical_key, mapping.vendor_key, mapping.to_vendor_value):
                populated.append(mapping.vendor_key)

        for key, value in self._descriptor.defaults.items():
            transformer.set_default(key, value)

        collisions = transformer.merge(config.extra_properties, protected=populated)
        for vendor_key in collisions:
            logger.warning(
                f"Passthrough property '{vendor_key}' collides with a mapped key for "
                f"{identifier}; keeping the mapped value",
                extra={"vendor_key": vendor_key, "implementation_identifier": identifier},
            )

        return transformer.result()

    def to_canonical_model(
        self, vendor_properties: Mapping[str, Any], drop_defaults: bool = False
    ) -> CanonicalPoolConfig:
        """
        Rebuilds a canonical config from a vendor property map.

        Mapped vendor keys become canonical fields; everything else, default-valued
        keys included, is preserved verbatim in ``extra_properties``.

        Args:
            vendor_properties: A map in this adapter's shape. It is never mutated.
            drop_defaults: Also drop vendor keys that still hold this adapter's
                declared default. Used when migrating to another implementation.
        """
        transformer = PropertyMapTransformer(vendor_properties)
        canonical: Dict[str, Any] = {}

        for mapping in reversed(self._descriptor.field_mappings):
            if mapping.vendor_key in transformer:
                canonical[mapping.canonical_key] = mapping.to_canonical_value(
                    transformer.pop(mapping.vendor_key)
                )

        if drop_defaults:
            for key, default in self._descriptor.defaults.items():
                if key in transformer and transformer.get(key) == default:
                    transformer.drop(key)

        canonical["extra_properties"] = transformer.result()
        return CanonicalPoolConfig.model_validate(canonical)

    def __repr__(self) -> str:
        return f"VendorAdapter({self.implementation_identifier()!r}, priority={self.priority})"
