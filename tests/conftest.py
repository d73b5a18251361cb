import pathlib
from typing import Any, Dict, Iterable, List

import pytest
import yaml

from xa_datasource.datasources.models import AdapterDescriptor, FieldMapping
from xa_datasource.datasources.registry import AdapterRegistry

FIXTURES_DIR = pathlib.Path(__file__).parent / "fixtures"


class FakeProbe:
    """Availability probe that reports a fixed set of identifiers and records calls."""

    def __init__(self, available: Iterable[str] = ()):
        self.available = set(available)
        self.calls: List[str] = []

    def is_available(self, identifier: str) -> bool:
        self.calls.append(identifier)
        return identifier in self.available


class VendorCases:
    """Serves the translation cases described in fixtures/vendor_cases.yaml.

    Asking for a case id that is not in the file fails the test.
    """

    def __init__(self, path: pathlib.Path):
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        self._cases: Dict[str, Dict[str, Any]] = {case["id"]: case for case in raw.get("cases", [])}

    def ids(self) -> List[str]:
        return list(self._cases)

    def get(self, case_id: str) -> Dict[str, Any]:
        if case_id not in self._cases:
            pytest.fail(f"No vendor case '{case_id}' in {FIXTURES_DIR / 'vendor_cases.yaml'}")
        return self._cases[case_id]


_VENDOR_CASES = VendorCases(FIXTURES_DIR / "vendor_cases.yaml")


def pytest_generate_tests(metafunc):
    if "vendor_case" in metafunc.fixturenames:
        metafunc.parametrize("vendor_case", _VENDOR_CASES.ids(), indirect=True)


@pytest.fixture
def vendor_cases():
    return _VENDOR_CASES


@pytest.fixture
def vendor_case(request, vendor_cases):
    return vendor_cases.get(request.param)


@pytest.fixture
def fake_probe():
    return FakeProbe()


@pytest.fixture
def pool_descriptor():
    """The sizing adapter used throughout the examples: url, sizes and a pool name default."""
    return AdapterDescriptor(
        implementation_identifier="example.pool.ExamplePool",
        field_mappings=[
            FieldMapping(canonical_key="url", vendor_key="jdbcUrl"),
            FieldMapping(canonical_key="max_pool_size", vendor_key="maximumPoolSize"),
            FieldMapping(canonical_key="min_idle", vendor_key="minimumPoolSize"),
        ],
        defaults={"poolName": "default"},
    )


@pytest.fixture
def registry(fake_probe, pool_descriptor):
    return AdapterRegistry(probe=fake_probe, adapters=[pool_descriptor])
