"""
In-memory secure store.

Process-local and volatile; used by tests and by clients that never keep
keys across runs.
"""

import threading
from typing import Dict

from securekey.common.exceptions import NotFoundError, PersistenceError
from securekey.storage.base import SecureStore, StoredKeyPair


class InMemorySecureStore(SecureStore):
    """Dictionary-backed secure store."""

    def __init__(self):
        self._records: Dict[str, StoredKeyPair] = {}
        self._lock = threading.Lock()

    def exists(self, identifier: str) -> bool:
        with self._lock:
            return identifier in self._records

    def save(self, record: StoredKeyPair) -> bool:
        with self._lock:
            if record.identifier in self._records:
                raise PersistenceError(
                    f"A key pair is already stored under '{record.identifier}'"
                )
            self._records[record.identifier] = record.model_copy()
        return True

    def load(self, identifier: str) -> StoredKeyPair:
        with self._lock:
            record = self._records.get(identifier)
        if record is None:
            raise NotFoundError(f"No key pair stored under '{identifier}'")
        return record.model_copy()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
