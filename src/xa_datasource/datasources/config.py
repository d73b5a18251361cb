import pathlib
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from xa_datasource.common.settings import settings
from xa_datasource.datasources.models import CanonicalPoolConfig


class PoolEntry(BaseModel):
    """A named canonical pool config."""
    id: str
    description: Optional[str] = None
    pool: CanonicalPoolConfig


class PoolFileConfig(BaseModel):
    """File-level schema for pools.yaml."""
    version: int = Field(1, description="Schema version")
    datasources: List[PoolEntry]


def load_pool_configs(path: Optional[pathlib.Path] = None) -> Dict[str, CanonicalPoolConfig]:
    """
    Loads canonical pool configs from YAML.

    Args:
        path: Config file; defaults to ``settings.pool_config_path``.

    Returns:
        A dictionary mapping datasource IDs to CanonicalPoolConfig objects.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If the YAML is unreadable or the envelope is invalid.
    """
    target_path = path or pathlib.Path(settings.pool_config_path)

    if not target_path.exists():
        raise FileNotFoundError(f"Pool config not found: {target_path}")

    try:
        raw: Any = yaml.safe_load(target_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML from {target_path}: {e}") from e

    try:
        file_config = PoolFileConfig.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Pool Configuration Invalid: {e}") from e

    configs: Dict[str, CanonicalPoolConfig] = {}
    for entry in file_config.datasources:
        if entry.id in configs:
            raise ValueError(f"Duplicate datasource id in {target_path}: {entry.id}")
        configs[entry.id] = entry.pool
    return configs
