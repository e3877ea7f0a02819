"""
Local JSON file store
One JSON file per key, readable only by the local user
"""
import hashlib
import json
import os
import tempfile
import time
from pathlib import Path
from typing import Any, List, Optional

from .base import KeyValueStore
from ..utils.logger import get_logger

logger = get_logger(__name__)


class JsonFileStore(KeyValueStore):
    """File-backed store for the data cache and sessions"""

    def __init__(self, directory: str, prefix: str = "", lifetime: int = 0):
        """
        Initialize the store

        Args:
            directory: Directory holding the files (created if missing)
            prefix: Prefix for file names, lets several stores share a directory
            lifetime: Default expiry in seconds (0 never expires)
        """
        self.base_path = Path(directory)
        self.prefix = prefix
        self.lifetime = lifetime

        self.base_path.mkdir(parents=True, exist_ok=True)
        os.chmod(self.base_path, 0o700)

    def _get_file(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:32]
        return self.base_path / f"{self.prefix}{digest}.json"

    def _read(self, path: Path) -> Optional[dict]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Error reading {path}: {e}")
            return None

    def get(self, key: str, default: Any = None) -> Any:
        path = self._get_file(key)
        record = self._read(path)
        if record is None or record.get("key") != key:
            return default
        expires_at = record.get("expires_at")
        if expires_at is not None and expires_at <= time.time():
            path.unlink(missing_ok=True)
            return default
        return record.get("value")

    def set(self, key: str, value: Any, lifetime: Optional[int] = None) -> None:
        lifetime = self.lifetime if lifetime is None else lifetime
        record = {
            "key": key,
            "value": value,
            "expires_at": time.time() + lifetime if lifetime else None,
        }
        path = self._get_file(key)
        # Each writer gets its own temp file, the rename is the commit
        fd, tmp_path = tempfile.mkstemp(dir=self.base_path, prefix=path.stem + ".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record, f)
            os.chmod(tmp_path, 0o600)  # User read/write only
            os.replace(tmp_path, path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> bool:
        path = self._get_file(key)
        if not path.exists():
            return False
        path.unlink(missing_ok=True)
        return True

    def keys(self) -> List[str]:
        keys = []
        now = time.time()
        for path in self.base_path.glob(f"{self.prefix}*.json"):
            record = self._read(path)
            if not record or "key" not in record:
                continue
            expires_at = record.get("expires_at")
            if expires_at is None or expires_at > now:
                keys.append(record["key"])
        return keys
