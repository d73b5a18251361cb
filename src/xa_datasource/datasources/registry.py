from __future__ import annotations

from threading import RLock
from typing import Dict, Iterable, List, Optional, Union

from xa_datasource.common.errors import (
    AmbiguousMappingError,
    DuplicateAdapterError,
    InvalidAdapterError,
    NoAvailableAdapterError,
    UnknownAdapterError,
)
from xa_datasource.common.logger import get_logger
from xa_datasource.datasources.adapter import VendorAdapter
from xa_datasource.datasources.models import AdapterDescriptor, CanonicalPoolConfig
from xa_datasource.datasources.probe import AvailabilityProbe, ImportlibProbe

logger = get_logger(__name__)

REQUIRED_CANONICAL_KEY = "url"


def validate_descriptor(descriptor: AdapterDescriptor) -> None:
    """
    Rejects descriptors whose mappings cannot be applied unambiguously.

    Raises:
        InvalidAdapterError: Empty identifier, unknown canonical key, or no
            mapping for ``url``.
        AmbiguousMappingError: Two mappings share a vendor key or a canonical key,
            one vendor key is the dotted parent of another, or a vendor key would
            overwrite a canonical key that a later mapping still has to read.
    """
    identifier = descriptor.implementation_identifier
    if not identifier or not identifier.strip():
        raise InvalidAdapterError("Adapter implementation identifier must not be empty")

    known = CanonicalPoolConfig.canonical_keys()
    mappings = descriptor.field_mappings
    seen_vendor: Dict[str, str] = {}
    seen_canonical: Dict[str, str] = {}

    for index, mapping in enumerate(mappings):
        if mapping.canonical_key not in known:
            raise InvalidAdapterError(
                f"Adapter '{identifier}' maps unknown canonical key '{mapping.canonical_key}'",
                {"implementation_identifier": identifier, "canonical_key": mapping.canonical_key},
            )
        if mapping.vendor_key in seen_vendor:
            raise AmbiguousMappingError(
                f"Adapter '{identifier}' maps both '{seen_vendor[mapping.vendor_key]}' and "
                f"'{mapping.canonical_key}' onto vendor key '{mapping.vendor_key}'",
                {"implementation_identifier": identifier, "vendor_key": mapping.vendor_key},
            )
        if mapping.canonical_key in seen_canonical:
            raise AmbiguousMappingError(
                f"Adapter '{identifier}' maps canonical key '{mapping.canonical_key}' more than once",
                {"implementation_identifier": identifier, "canonical_key": mapping.canonical_key},
            )
        for later in mappings[index + 1:]:
            if later.canonical_key == mapping.vendor_key:
                raise AmbiguousMappingError(
                    f"Adapter '{identifier}' writes vendor key '{mapping.vendor_key}' before "
                    f"canonical key '{later.canonical_key}' is read; reorder the mappings",
                    {"implementation_identifier": identifier, "vendor_key": mapping.vendor_key},
                )
        seen_vendor[mapping.vendor_key] = mapping.canonical_key
        seen_canonical[mapping.canonical_key] = mapping.vendor_key

    vendor_keys = descriptor.vendor_keys
    for key in vendor_keys:
        for other in vendor_keys:
            if other.startswith(f"{key}."):
                raise AmbiguousMappingError(
                    f"Adapter '{identifier}' maps both '{key}' and its nested key '{other}'",
                    {"implementation_identifier": identifier, "vendor_key": key},
                )

    if REQUIRED_CANONICAL_KEY not in seen_canonical:
        raise InvalidAdapterError(
            f"Adapter '{identifier}' does not map required canonical key '{REQUIRED_CANONICAL_KEY}'",
            {"implementation_identifier": identifier, "canonical_key": REQUIRED_CANONICAL_KEY},
        )


class AdapterRegistry:
    """
    Catalog of vendor adapters and the resolution logic over them.

    Built once at startup and passed to consumers. Registration is append-only and
    serialized under a lock; lookups read a consistent snapshot under the same lock.
    """

    def __init__(
        self,
        probe: Optional[AvailabilityProbe] = None,
        adapters: Optional[Iterable[Union[VendorAdapter, AdapterDescriptor]]] = None,
    ):
        """
        Args:
            probe: Availability check used by ``resolve_available``. Defaults to
                ``ImportlibProbe``.
            adapters: Adapters or descriptors to register immediately, in order.
        """
        self._probe: AvailabilityProbe = probe if probe is not None else ImportlibProbe()
        self._adapters: Dict[str, VendorAdapter] = {}
        self._order: Dict[str, int] = {}
        self._lock = RLock()
        for adapter in adapters or ():
            self.register(adapter)

    def register(self, adapter: Union[VendorAdapter, AdapterDescriptor]) -> VendorAdapter:
        """
        Adds an adapter.

        Raises:
            DuplicateAdapterError: The identifier is already registered.
            AmbiguousMappingError: The declared mappings collide.
            InvalidAdapterError: The descriptor is malformed.
        """
        if isinstance(adapter, AdapterDescriptor):
            adapter = VendorAdapter(adapter)
        validate_descriptor(adapter.descriptor)

        identifier = adapter.implementation_identifier()
        with self._lock:
            if identifier in self._adapters:
                raise DuplicateAdapterError(
                    f"Adapter already registered for '{identifier}'",
                    {"implementation_identifier": identifier},
                )
            self._order[identifier] = len(self._order)
            self._adapters[identifier] = adapter

        logger.info(
            f"Registered pool adapter {identifier}",
            extra={"implementation_identifier": identifier, "priority": adapter.priority},
        )
        return adapter

    def resolve_by_identifier(self, identifier: str) -> VendorAdapter:
        with self._lock:
            adapter = self._adapters.get(identifier)
            if adapter is None:
                raise UnknownAdapterError(
                    f"No adapter registered for '{identifier}'. "
                    f"Registered: {self._ordered_identifiers()}",
                    {"implementation_identifier": identifier},
                )
            return adapter

    def resolve_available(self) -> VendorAdapter:
        """
        Returns the first adapter, in ``(priority, registration order)``, whose pool
        implementation the probe reports as loadable.

        Raises:
            NoAvailableAdapterError: None of the registered implementations is loadable.
        """
        candidates = self.adapters()
        for adapter in candidates:
            identifier = adapter.implementation_identifier()
            available = self._probe.is_available(identifier)
            logger.debug(f"Probe {identifier}: {'available' if available else 'missing'}")
            if available:
                logger.info(
                    f"Resolved available pool adapter {identifier}",
                    extra={"implementation_identifier": identifier},
                )
                return adapter

        raise NoAvailableAdapterError(
            "None of the registered pool implementations is available in this process. "
            f"Probed: {[a.implementation_identifier() for a in candidates]}",
            {"probed": [a.implementation_identifier() for a in candidates]},
        )

    def adapters(self) -> List[VendorAdapter]:
        """Registered adapters in probe order."""
        with self._lock:
            return [self._adapters[i] for i in self._ordered_identifiers()]

    def identifiers(self) -> List[str]:
        with self._lock:
            return self._ordered_identifiers()

    def __contains__(self, identifier: str) -> bool:
        with self._lock:
            return identifier in self._adapters

    def __len__(self) -> int:
        with self._lock:
            return len(self._adapters)

    def _ordered_identifiers(self) -> List[str]:
        return sorted(
            self._adapters,
            key=lambda i: (self._adapters[i].priority, self._order[i]),
        )
