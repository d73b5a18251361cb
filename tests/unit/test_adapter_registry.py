import importlib
import importlib.util
import threading
from unittest.mock import patch

import pytest

from xa_datasource.common.errors import (
    AmbiguousMappingError,
    DuplicateAdapterError,
    InvalidAdapterError,
    NoAvailableAdapterError,
    UnknownAdapterError,
)
from xa_datasource.datasources.adapter import VendorAdapter
from xa_datasource.datasources.models import AdapterDescriptor, FieldMapping
from xa_datasource.datasources.probe import ImportlibProbe
from xa_datasource.datasources.registry import AdapterRegistry, validate_descriptor


def _descriptor(identifier, priority=100, mappings=None):
    return AdapterDescriptor(
        implementation_identifier=identifier,
        priority=priority,
        field_mappings=mappings or [FieldMapping(canonical_key="url", vendor_key="dsn")],
    )


def test_register_and_resolve_by_identifier(registry, pool_descriptor):
    adapter = registry.resolve_by_identifier("example.pool.ExamplePool")

    assert isinstance(adapter, VendorAdapter)
    assert adapter.descriptor == pool_descriptor
    assert "example.pool.ExamplePool" in registry
    assert len(registry) == 1


def test_register_accepts_adapter_instances(fake_probe):
    registry = AdapterRegistry(probe=fake_probe)
    adapter = VendorAdapter(_descriptor("a.Pool"))

    assert registry.register(adapter) is adapter
    assert registry.resolve_by_identifier("a.Pool") is adapter


def test_register_rejects_duplicate_identifier(registry, pool_descriptor):
    """Verifies that two adapters can never share an implementation identifier."""
    with pytest.raises(DuplicateAdapterError) as exc:
        registry.register(pool_descriptor)

    assert exc.value.details["implementation_identifier"] == "example.pool.ExamplePool"
    assert exc.value.is_fatal_at_startup
    assert len(registry) == 1


def test_register_rejects_vendor_key_collision(registry):
    descriptor = _descriptor(
        "collide.Pool",
        mappings=[
            FieldMapping(canonical_key="max_pool_size", vendor_key="size"),
            FieldMapping(canonical_key="min_idle", vendor_key="size"),
        ],
    )

    with pytest.raises(AmbiguousMappingError) as exc:
        registry.register(descriptor)

    assert exc.value.details["vendor_key"] == "size"
    assert "collide.Pool" not in registry


def test_register_rejects_repeated_canonical_key():
    descriptor = _descriptor(
        "twice.Pool",
        mappings=[
            FieldMapping(canonical_key="url", vendor_key="dsn"),
            FieldMapping(canonical_key="url", vendor_key="conninfo"),
        ],
    )

    with pytest.raises(AmbiguousMappingError):
        validate_descriptor(descriptor)


def test_register_rejects_parent_and_nested_vendor_keys():
    descriptor = _descriptor(
        "nested.Pool",
        mappings=[
            FieldMapping(canonical_key="url", vendor_key="kwargs"),
            FieldMapping(canonical_key="username", vendor_key="kwargs.user"),
        ],
    )

    with pytest.raises(AmbiguousMappingError):
        validate_descriptor(descriptor)


def test_register_rejects_mapping_that_overwrites_pending_canonical_key():
    """Verifies that a rename onto a canonical key still to be read is rejected."""
    descriptor = _descriptor(
        "order.Pool",
        mappings=[
            FieldMapping(canonical_key="username", vendor_key="password"),
            FieldMapping(canonical_key="password", vendor_key="secret"),
        ],
    )

    with pytest.raises(AmbiguousMappingError):
        validate_descriptor(descriptor)


def test_reordered_mappings_are_accepted():
    descriptor = _descriptor(
        "order.Pool",
        mappings=[
            FieldMapping(canonical_key="url", vendor_key="dsn"),
            FieldMapping(canonical_key="password", vendor_key="secret"),
            FieldMapping(canonical_key="username", vendor_key="password"),
        ],
    )

    validate_descriptor(descriptor)


def test_register_rejects_unknown_canonical_key():
    descriptor = _descriptor("bad.Pool", mappings=[FieldMapping(canonical_key="maxLifetime", vendor_key="lifetime")])

    with pytest.raises(InvalidAdapterError):
        validate_descriptor(descriptor)


def test_register_rejects_descriptor_without_url_mapping(registry):
    """Verifies that an adapter which would silently lose the connection url is refused."""
    descriptor = _descriptor("nourl.Pool", mappings=[FieldMapping(canonical_key="max_pool_size", vendor_key="size")])

    with pytest.raises(InvalidAdapterError) as exc:
        registry.register(descriptor)

    assert exc.value.details == {"implementation_identifier": "nourl.Pool", "canonical_key": "url"}
    assert exc.value.is_fatal_at_startup
    assert "nourl.Pool" not in registry


def test_register_rejects_blank_identifier():
    with pytest.raises(InvalidAdapterError):
        validate_descriptor(_descriptor("  "))


def test_resolve_unknown_identifier_leaves_registry_unchanged(registry):
    before = registry.identifiers()

    with pytest.raises(UnknownAdapterError) as exc:
        registry.resolve_by_identifier("missing.Pool")

    assert isinstance(exc.value, LookupError)
    assert registry.identifiers() == before


def test_resolve_available_follows_priority_then_registration_order(fake_probe):
    # Arrange
    registry = AdapterRegistry(
        probe=fake_probe,
        adapters=[
            _descriptor("late.Pool", priority=50),
            _descriptor("first.Pool", priority=10),
            _descriptor("tie_a.Pool", priority=20),
            _descriptor("tie_b.Pool", priority=20),
        ],
    )
    fake_probe.available = {"late.Pool", "tie_b.Pool", "tie_a.Pool"}

    # Act
    adapter = registry.resolve_available()

    # Assert
    assert adapter.implementation_identifier() == "tie_a.Pool"
    assert fake_probe.calls == ["first.Pool", "tie_a.Pool"]
    assert registry.identifiers() == ["first.Pool", "tie_a.Pool", "tie_b.Pool", "late.Pool"]


def test_resolve_available_is_deterministic(fake_probe):
    registry = AdapterRegistry(
        probe=fake_probe,
        adapters=[_descriptor("a.Pool", priority=1), _descriptor("b.Pool", priority=2)],
    )
    fake_probe.available = {"a.Pool", "b.Pool"}

    results = {registry.resolve_available().implementation_identifier() for _ in range(5)}

    assert results == {"a.Pool"}


def test_resolve_available_reprobes_when_environment_changes(fake_probe):
    registry = AdapterRegistry(
        probe=fake_probe,
        adapters=[_descriptor("a.Pool", priority=1), _descriptor("b.Pool", priority=2)],
    )
    fake_probe.available = {"b.Pool"}
    assert registry.resolve_available().implementation_identifier() == "b.Pool"

    fake_probe.available = {"a.Pool", "b.Pool"}
    assert registry.resolve_available().implementation_identifier() == "a.Pool"


def test_resolve_available_without_match_raises(registry):
    with pytest.raises(NoAvailableAdapterError) as exc:
        registry.resolve_available()

    assert exc.value.details["probed"] == ["example.pool.ExamplePool"]
    assert not exc.value.is_fatal_at_startup


def test_resolve_available_skips_implementation_that_fails_to_import():
    """Verifies that a pool library raising a non-import error at import time is skipped."""
    registry = AdapterRegistry(
        probe=ImportlibProbe(),
        adapters=[_descriptor("broken_pool.Pool", priority=1), _descriptor("collections.OrderedDict", priority=2)],
    )
    real_import = importlib.import_module
    real_find_spec = importlib.util.find_spec

    def fake_find_spec(name, *args, **kwargs):
        return object() if name == "broken_pool" else real_find_spec(name, *args, **kwargs)

    def fake_import(name, *args, **kwargs):
        if name == "broken_pool":
            raise OSError("libpq missing")
        return real_import(name, *args, **kwargs)

    with patch("xa_datasource.datasources.probe.importlib.util.find_spec", side_effect=fake_find_spec), \
            patch("xa_datasource.datasources.probe.importlib.import_module", side_effect=fake_import):
        adapter = registry.resolve_available()

    assert adapter.implementation_identifier() == "collections.OrderedDict"


def test_concurrent_registration_keeps_every_adapter(fake_probe):
    registry = AdapterRegistry(probe=fake_probe)
    errors = []

    def register(i):
        try:
            registry.register(_descriptor(f"pool{i}.Pool", priority=i))
            registry.identifiers()
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=register, args=(i,)) for i in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert registry.identifiers() == [f"pool{i}.Pool" for i in range(20)]
