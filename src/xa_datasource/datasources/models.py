from __future__ import annotations

from typing import Any, Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class CanonicalPoolConfig(BaseModel):
    """
    Vendor-neutral pool configuration.

    Field names are the canonical keys referenced by ``FieldMapping.canonical_key``.
    camelCase aliases (``maxPoolSize``, ``minIdle``...) are accepted on input so that
    configs written for other tooling load unchanged.

    Invariants such as ``min_idle <= max_pool_size`` are checked by the
    ``DatasourceAssembler``, not here: an incomplete config is a legal value until
    it is assembled.

    Attributes:
        url: Connection URL / DSN. Must be non-empty once assembled.
        driver_class_name: Driver module or callable name (vendor-specific meaning).
        username: Login user.
        password: Login password.
        max_pool_size: Upper bound of pooled connections.
        min_idle: Connections kept idle in the pool.
        connection_timeout_ms: Checkout / connect timeout in milliseconds.
        extra_properties: Vendor passthrough properties, merged verbatim.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    url: Optional[str] = None
    driver_class_name: Optional[str] = Field(default=None, alias="driverClassName")
    username: Optional[str] = None
    password: Optional[str] = None
    max_pool_size: Optional[int] = Field(default=None, alias="maxPoolSize")
    min_idle: Optional[int] = Field(default=None, alias="minIdle")
    connection_timeout_ms: Optional[int] = Field(default=None, alias="connectionTimeoutMillis")
    extra_properties: Dict[str, Any] = Field(default_factory=dict, alias="extraProperties")

    @classmethod
    def canonical_keys(cls) -> FrozenSet[str]:
        """Field names an adapter may map; ``extra_properties`` is never mapped."""
        return frozenset(name for name in cls.model_fields if name != "extra_properties")

    def mapped_values(self) -> Dict[str, Any]:
        """Returns the canonical fields that are set, keyed by field name."""
        return {
            key: value
            for key, value in self.model_dump(exclude={"extra_properties"}).items()
            if value is not None
        }


class FieldMapping(BaseModel):
    """One canonical key -> vendor key rename, optionally unit-converted.

    ``vendor_key`` may be a dotted path (``kwargs.user``) to address a nested dict.
    ``divisor`` divides the value on the way to the vendor map, e.g. ``1000`` to
    turn milliseconds into seconds; the reverse multiplies and rounds to an int.
    """
    model_config = ConfigDict(frozen=True)

    canonical_key: str
    vendor_key: str
    divisor: Optional[int] = Field(default=None, gt=0)

    def to_vendor_value(self, value: Any) -> Any:
        if self.divisor is None or value is None:
            return value
        return value / self.divisor

    def to_canonical_value(self, value: Any) -> Any:
        if self.divisor is None or value is None:
            return value
        return int(round(float(value) * self.divisor))


class AdapterDescriptor(BaseModel):
    """Declarative description of one pool implementation's property shape.

    Attributes:
        implementation_identifier: Fully-qualified ``module.Attribute`` of the pool class.
        field_mappings: Ordered renames applied by the transformer.
        defaults: Vendor key -> value used when nothing else populates the key.
        priority: Probe order for availability resolution (lower probes first).
        description: Human-readable note.
    """
    model_config = ConfigDict(frozen=True)

    implementation_identifier: str
    field_mappings: Tuple[FieldMapping, ...] = ()
    defaults: Dict[str, Any] = Field(default_factory=dict)
    priority: int = 100
    description: Optional[str] = None

    @property
    def vendor_keys(self) -> Tuple[str, ...]:
        return tuple(m.vendor_key for m in self.field_mappings)
