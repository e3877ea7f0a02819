"""
Abstract key/value store interface
Backs the data cache and the session service
"""
from abc import ABC, abstractmethod
from typing import Any, List, Optional


class KeyValueStore(ABC):
    """Abstract interface for key/value backends"""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Get a value, or default if missing or expired"""
        pass

    @abstractmethod
    def set(self, key: str, value: Any, lifetime: Optional[int] = None) -> None:
        """
        Store a value

        Args:
            key: Key
            value: JSON-serializable value
            lifetime: Seconds until expiry (None uses the store default, 0 never expires)
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a key, returns True if it existed"""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        """All live keys"""
        pass

    def exists(self, key: str) -> bool:
        _missing = object()
        return self.get(key, _missing) is not _missing

    def clear(self) -> None:
        for key in self.keys():
            self.delete(key)
