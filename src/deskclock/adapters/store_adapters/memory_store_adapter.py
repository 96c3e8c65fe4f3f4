from typing import Dict, Optional

from deskclock.ports.store_port import PersistentStore


class MemoryStoreAdapter(PersistentStore):
    """Process-local store; values still go through JSON so behaviour matches the SQLite store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.raw: Dict[str, str] = dict(initial or {})

    def _read(self, key: str) -> Optional[str]:
        return self.raw.get(key)

    def _write(self, key: str, raw: str) -> None:
        self.raw[key] = raw
