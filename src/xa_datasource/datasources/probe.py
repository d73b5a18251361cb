import importlib
import importlib.util
from typing import Protocol, runtime_checkable

from xa_datasource.common.logger import get_logger

logger = get_logger(__name__)


@runtime_checkable
class AvailabilityProbe(Protocol):
    """Answers whether a pool implementation can be loaded in this process."""

    def is_available(self, identifier: str) -> bool:
        ...


class ImportlibProbe:
    """
    Checks ``module.Attribute`` identifiers with importlib.

    The module must be importable and expose the attribute. Import failures of
    any kind count as "not available"; they are logged at debug level.
    """

    def is_available(self, identifier: str) -> bool:
        module_name, _, attribute = identifier.rpartition(".")
        if not module_name:
            module_name, attribute = identifier, ""

        try:
            if importlib.util.find_spec(module_name) is None:
                return False
            module = importlib.import_module(module_name)
        except Exception as e:
            logger.debug(f"Probe for {identifier} failed to import {module_name}: {e!r}")
            return False

        return not attribute or hasattr(module, attribute)
