import json
from abc import ABC, abstractmethod
from typing import Any, Optional

from deskclock.utils import setup_logger
from deskclock.utils.custom_exception import StorageError

logger = setup_logger(__name__)

class PersistentStore(ABC):
    """
    Named JSON values that survive a restart.

    `load` and `save` never raise: the in-memory state of the clock is
    authoritative for the running session and the store is only a recovery
    channel across restarts, so a broken store degrades to defaults.
    """

    def load(self, key: str, fallback: Any = None) -> Any:
        """Return the decoded value stored under `key`, or `fallback`."""
        try:
            raw = self._read(key)
        except StorageError as e:
            logger.error(f"Could not read '{key}' from store: {e}")
            return fallback
        if raw is None:
            return fallback
        try:
            value = json.loads(raw)
        except (TypeError, ValueError):
            logger.exception(f"Stored value for '{key}' is not valid JSON, using fallback.")
            return fallback
        return fallback if value is None else value

    def save(self, key: str, value: Any) -> bool:
        """Encode and write `value`; returns False (and logs) on any failure."""
        try:
            raw = json.dumps(value)
        except (TypeError, ValueError):
            logger.exception(f"Value for '{key}' is not JSON serializable, not saved.")
            return False
        try:
            self._write(key, raw)
        except StorageError as e:
            logger.error(f"Could not write '{key}' to store: {e}")
            return False
        return True

    @abstractmethod
    def _read(self, key: str) -> Optional[str]:
        """Return the raw JSON text stored under `key`, or None when absent."""
        pass

    @abstractmethod
    def _write(self, key: str, raw: str) -> None:
        """Persist raw JSON text under `key`. Backend errors must surface as StorageError."""
        pass

    def close(self) -> None:
        pass
