"""
Layered configuration store

Loads a base JSON tree and a local override tree and deep-merges them into
one read-only ConfigNode.
"""
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

from .errors import ConfigLoadError, ConfigMergeError
from ..utils.logger import get_logger

logger = get_logger(__name__)

_MISSING = object()


def _freeze(value: Any) -> Any:
    """Convert plain containers into their read-only equivalents"""
    if isinstance(value, ConfigNode):
        return value
    if isinstance(value, Mapping):
        return ConfigNode(value)
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, ConfigNode):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


def _kind(value: Any) -> str:
    if isinstance(value, Mapping):
        return "map"
    if isinstance(value, (list, tuple)):
        return "sequence"
    return "scalar"


class ConfigNode(Mapping):
    """
    Read-only hierarchical key/value tree

    Nested maps are ConfigNodes and sequences are tuples, so a node can be
    shared freely once built. Keys are reachable as items or attributes:

        config["cache"]["adapter"] == config.cache.adapter
    """

    __slots__ = ("_data",)

    def __init__(self, data: Optional[Mapping] = None):
        frozen = {str(key): _freeze(value) for key, value in (data or {}).items()}
        object.__setattr__(self, "_data", frozen)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"Config has no key '{name}'") from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("ConfigNode is read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("ConfigNode is read-only")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConfigNode):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self.to_dict() == dict(other)
        return NotImplemented

    def __hash__(self):
        return hash(json.dumps(self.to_dict(), sort_keys=True, default=str))

    def __repr__(self) -> str:
        return f"ConfigNode({self.to_dict()!r})"

    def __reduce__(self):
        return (ConfigNode, (self.to_dict(),))

    def path(self, dotted: str, default: Any = None) -> Any:
        """Look up a nested value by dotted path, e.g. 'redis.session.host'"""
        node: Any = self
        for part in dotted.split("."):
            if not isinstance(node, ConfigNode) or part not in node:
                return default
            node = node[part]
        return node

    def to_dict(self) -> Dict[str, Any]:
        """Plain, mutable deep copy of the tree"""
        return {key: _thaw(value) for key, value in self._data.items()}

    def merge(self, override: Mapping) -> "ConfigNode":
        """Return a new node with override deep-merged over this one"""
        return merge(self, override)


def _merge_maps(base: Mapping, override: Mapping, prefix: str) -> Dict[str, Any]:
    merged: Dict[str, Any] = dict(base)
    for key, value in override.items():
        key = str(key)
        path = f"{prefix}.{key}" if prefix else key
        current = merged.get(key, _MISSING)
        if current is _MISSING:
            merged[key] = value
            continue

        base_is_map = isinstance(current, Mapping)
        override_is_map = isinstance(value, Mapping)
        if base_is_map and override_is_map:
            merged[key] = _merge_maps(current, value, path)
        elif base_is_map or override_is_map:
            raise ConfigMergeError(path, _kind(current), _kind(value))
        else:
            # leaves and sequences are replaced wholesale
            merged[key] = value
    return merged


def merge(base: Mapping, override: Mapping) -> ConfigNode:
    """
    Deep-merge override over base

    Override leaves replace base leaves at the same path, maps recurse, and
    keys missing from the override are kept from base.

    Raises:
        ConfigMergeError: a map meets a non-map at the same path
    """
    return ConfigNode(_merge_maps(base, override, ""))


def load_file(path: Union[str, Path]) -> ConfigNode:
    """
    Read one JSON config source

    Raises:
        ConfigLoadError: file missing, unreadable, invalid JSON, or not an object
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigLoadError(str(path), "file not found") from None
    except json.JSONDecodeError as e:
        raise ConfigLoadError(str(path), f"invalid JSON ({e})") from e
    except UnicodeDecodeError as e:
        raise ConfigLoadError(str(path), f"not valid UTF-8 ({e})") from e
    except RecursionError as e:
        raise ConfigLoadError(str(path), "JSON nested too deeply") from e
    except OSError as e:
        raise ConfigLoadError(str(path), str(e)) from e

    if not isinstance(data, dict):
        raise ConfigLoadError(str(path), f"top-level value must be an object, got {type(data).__name__}")
    return ConfigNode(data)


def load(base_path: Union[str, Path], override_path: Union[str, Path]) -> ConfigNode:
    """
    Load the base and local override sources and merge them

    Args:
        base_path: Path to the base config JSON
        override_path: Path to the local override JSON

    Returns:
        Merged, read-only ConfigNode
    """
    base = load_file(base_path)
    override = load_file(override_path)
    config = merge(base, override)
    logger.debug(f"Config loaded from {base_path} with overrides from {override_path}")
    return config
