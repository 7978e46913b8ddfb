"""
Expiry Cache

In-memory mirror of the known FileRecords, keyed by file id.
"""

import threading
from typing import Dict, Optional

from .entities import FileRecord


class ExpiryCache:
    """
    Process-scoped mapping of file id to FileRecord.

    Grows only through insert_if_absent() (discovery) and shrinks only
    through remove() (reclamation). It is never a source of truth: every
    entry is rebuildable from the metadata store. Thread-safe.
    """

    def __init__(self):
        self._entries: Dict[str, FileRecord] = {}
        self._lock = threading.Lock()

    def has(self, file_id: str) -> bool:
        with self._lock:
            return file_id in self._entries

    def get(self, file_id: str) -> Optional[FileRecord]:
        with self._lock:
            return self._entries.get(file_id)

    def insert_if_absent(self, file_id: str, record: FileRecord) -> bool:
        """
        Add an entry unless one is already present.

        Returns:
            True if the entry was inserted, False if it already existed
        """
        with self._lock:
            if file_id in self._entries:
                return False
            self._entries[file_id] = record
            return True

    def remove(self, file_id: str) -> bool:
        """
        Drop an entry. Removing an unknown id is a no-op.

        Returns:
            True if an entry was removed
        """
        with self._lock:
            return self._entries.pop(file_id, None) is not None

    def snapshot_entries(self) -> Dict[str, FileRecord]:
        """Point-in-time copy of the mapping, safe to iterate while others mutate."""
        with self._lock:
            return dict(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, file_id: str) -> bool:
        return self.has(file_id)
