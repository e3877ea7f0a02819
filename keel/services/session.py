"""
Session service
"""
import secrets
from typing import Any, Dict, Optional

from ..storage.base import KeyValueStore


class Session:
    """
    Per-client key/value bag persisted in a KeyValueStore

    A fresh session is opened on first use if start() was not called.
    The whole bag is written back on every change.
    """

    def __init__(self, store: KeyValueStore, name: str = "keel_session", lifetime: int = 0):
        self.store = store
        self.name = name
        self.lifetime = lifetime
        self.session_id: Optional[str] = None
        self._data: Dict[str, Any] = {}

    @property
    def started(self) -> bool:
        return self.session_id is not None

    def start(self, session_id: Optional[str] = None) -> str:
        """Resume an existing session or open a new one, returns the id"""
        if session_id:
            data = self.store.get(self._key(session_id))
            if isinstance(data, dict):
                self.session_id = session_id
                self._data = data
                return session_id
        self.session_id = secrets.token_urlsafe(24)
        self._data = {}
        return self.session_id

    def _key(self, session_id: str) -> str:
        return f"{self.name}:{session_id}"

    def _ensure_started(self) -> None:
        if not self.started:
            self.start()

    def _save(self) -> None:
        self.store.set(self._key(self.session_id), self._data, lifetime=self.lifetime)

    def get(self, key: str, default: Any = None) -> Any:
        self._ensure_started()
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._ensure_started()
        self._data[key] = value
        self._save()

    def has(self, key: str) -> bool:
        self._ensure_started()
        return key in self._data

    def remove(self, key: str) -> None:
        self._ensure_started()
        if key in self._data:
            del self._data[key]
            self._save()

    def destroy(self) -> None:
        if self.started:
            self.store.delete(self._key(self.session_id))
        self.session_id = None
        self._data = {}
