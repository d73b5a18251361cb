"""
Ordered key/value rewriting used by every vendor adapter.

Keys are plain strings or dotted paths (``kwargs.user``) addressing nested dicts.
The transformer owns a deep copy of its input; callers get a fresh dict from
``result()`` and their own mapping is never touched.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

_MISSING = object()


def split_path(key: str) -> List[str]:
    return key.split(".")


class PropertyMapTransformer:
    """Applies transfer / set_default / drop / merge over a working map."""

    def __init__(self, source: Optional[Mapping[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(dict(source or {}))

    def __contains__(self, key: str) -> bool:
        return self._get(key) is not _MISSING

    def get(self, key: str, default: Any = None) -> Any:
        value = self._get(key)
        return default if value is _MISSING else value

    def transfer(self, source_key: str, destination_key: str, convert=None) -> bool:
        """
        Moves the value under ``source_key`` to ``destination_key``.

        Absent source keys are a no-op. A dotted source is hoisted out of its
        parent dict; parents left empty are removed.

        Returns:
            True if a value was moved.
        """
        value = self._pop(source_key)
        if value is _MISSING:
            return False
        if convert is not None:
            value = convert(value)
        self._set(destination_key, value)
        return True

    def set_default(self, key: str, value: Any) -> bool:
        """Inserts ``value`` under ``key`` only if ``key`` is not present."""
        if key in self:
            return False
        self._set(key, copy.deepcopy(value))
        return True

    def pop(self, key: str, default: Any = None) -> Any:
        """Removes and returns the value under ``key``, hoisting dotted paths."""
        value = self._pop(key)
        return default if value is _MISSING else value

    def drop(self, key: str) -> None:
        self._pop(key)

    def merge(self, extra: Mapping[str, Any], protected: Iterable[str] = ()) -> List[str]:
        """
        Merges passthrough properties without overwriting ``protected`` keys.

        Nested dicts are merged key by key. A protected key, or any parent of a
        protected key that is not a dict on the incoming side, wins over the
        incoming value. Dotted incoming keys (``"kwargs.user"``) are stored
        literally, but one that names, contains or sits under a protected path is
        discarded as a collision.

        Returns:
            Dotted paths of incoming values that were discarded because of a collision.
        """
        protected_paths = set(protected)
        collisions: List[str] = []
        self._merge_into(self._data, extra, "", protected_paths, collisions)
        return collisions

    def result(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    def _merge_into(self, target: Dict[str, Any], extra: Mapping[str, Any], prefix: str,
                    protected: set, collisions: List[str]) -> None:
        for key, value in extra.items():
            path = f"{prefix}{key}"
            if "." in key and _overlaps(path, protected):
                collisions.append(path)
            elif key not in target:
                target[key] = copy.deepcopy(value)
            elif isinstance(target[key], dict) and isinstance(value, Mapping):
                self._merge_into(target[key], value, f"{path}.", protected, collisions)
            elif path in protected or _is_parent_of(path, protected):
                collisions.append(path)
            else:
                target[key] = copy.deepcopy(value)

    def _get(self, key: str) -> Any:
        node: Any = self._data
        for part in split_path(key):
            if not isinstance(node, dict) or part not in node:
                return _MISSING
            node = node[part]
        return node

    def _set(self, key: str, value: Any) -> None:
        parts = split_path(key)
        node = self._data
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value

    def _pop(self, key: str) -> Any:
        parts = split_path(key)
        trail: List[Tuple[Dict[str, Any], str]] = []
        node: Any = self._data
        for part in parts[:-1]:
            if not isinstance(node, dict) or not isinstance(node.get(part), dict):
                return _MISSING
            trail.append((node, part))
            node = node[part]
        if parts[-1] not in node:
            return _MISSING
        value = node.pop(parts[-1])
        for parent, part in reversed(trail):
            if parent[part]:
                break
            del parent[part]
        return value


def _is_parent_of(path: str, protected: set) -> bool:
    prefix = f"{path}."
    return any(p.startswith(prefix) for p in protected)


def _overlaps(path: str, protected: set) -> bool:
    return path in protected or _is_parent_of(path, protected) or any(
        path.startswith(f"{p}.") for p in protected
    )
