"""
In-process key/value store
"""
import threading
import time
from typing import Any, Dict, List, Optional, Tuple

from .base import KeyValueStore


class MemoryStore(KeyValueStore):
    """Dict-backed store with per-key expiry"""

    def __init__(self, lifetime: int = 0):
        self.lifetime = lifetime
        self._data: Dict[str, Tuple[Any, Optional[float]]] = {}
        self._lock = threading.Lock()

    def _expires_at(self, lifetime: Optional[int]) -> Optional[float]:
        lifetime = self.lifetime if lifetime is None else lifetime
        return time.time() + lifetime if lifetime else None

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return default
            value, expires_at = item
            if expires_at is not None and expires_at <= time.time():
                del self._data[key]
                return default
            return value

    def set(self, key: str, value: Any, lifetime: Optional[int] = None) -> None:
        with self._lock:
            self._data[key] = (value, self._expires_at(lifetime))

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def keys(self) -> List[str]:
        now = time.time()
        with self._lock:
            return [k for k, (_, exp) in self._data.items() if exp is None or exp > now]
