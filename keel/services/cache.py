"""
Application cache service
"""
from typing import Any, Callable, Optional

from ..core.container import ServiceContainer
from ..storage.base import KeyValueStore


class Cache:
    """
    Prefixed cache on top of a key/value backend

    Uses the `data_cache` service when it is registered, otherwise the
    backend given at construction.
    """

    def __init__(
        self,
        container: ServiceContainer,
        backend: Optional[KeyValueStore] = None,
        prefix: str = "",
        lifetime: Optional[int] = None
    ):
        self.container = container
        self._backend = backend
        self.prefix = prefix
        self.lifetime = lifetime

    @property
    def backend(self) -> KeyValueStore:
        if self.container.has("data_cache"):
            return self.container.resolve("data_cache")
        if self._backend is None:
            raise RuntimeError("Cache has no backend: register 'data_cache' or pass one")
        return self._backend

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str, default: Any = None) -> Any:
        return self.backend.get(self._key(key), default)

    def save(self, key: str, value: Any, lifetime: Optional[int] = None) -> None:
        self.backend.set(self._key(key), value, self.lifetime if lifetime is None else lifetime)

    def delete(self, key: str) -> bool:
        return self.backend.delete(self._key(key))

    def exists(self, key: str) -> bool:
        return self.backend.exists(self._key(key))

    def remember(self, key: str, producer: Callable[[], Any], lifetime: Optional[int] = None) -> Any:
        """Return the cached value, computing and storing it on a miss"""
        _missing = object()
        value = self.get(key, _missing)
        if value is _missing:
            value = producer()
            self.save(key, value, lifetime)
        return value
