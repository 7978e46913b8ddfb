"""
In-memory repository implementations for unit tests.

They honour the MetadataStore and BlobStore contracts and can be told to
fail on specific ids to exercise error paths.
"""

import threading
from io import BytesIO
from typing import BinaryIO, Dict, Iterator, Optional, Set

from filedrop.domain.errors import RecordNotFoundError, StorageFailureError
from filedrop.domain.file_storage.entities import FileRecord
from filedrop.domain.file_storage.repositories import BlobStore, MetadataStore


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance_minutes(self, minutes: float) -> None:
        self.now += int(minutes * 60_000)


class InMemoryMetadataStore(MetadataStore):
    """Stores the serialized record text, like the real backends do."""

    def __init__(self):
        self._texts: Dict[str, str] = {}
        self._lock = threading.Lock()
        self.fail_get: Set[str] = set()
        self.fail_delete: Set[str] = set()
        self.fail_put = False
        self.fail_list = False
        self.get_calls = 0
        self.delete_calls = 0

    def put(self, file_id: str, record: FileRecord) -> None:
        if self.fail_put:
            raise StorageFailureError(f"put failed for {file_id}")
        with self._lock:
            self._texts[file_id] = record.to_text()

    def put_raw(self, file_id: str, text: str) -> None:
        with self._lock:
            self._texts[file_id] = text

    def get(self, file_id: str) -> FileRecord:
        with self._lock:
            self.get_calls += 1
        if file_id in self.fail_get:
            raise StorageFailureError(f"get failed for {file_id}")
        with self._lock:
            text = self._texts.get(file_id)
        if text is None:
            raise RecordNotFoundError(f"no record {file_id}")
        return FileRecord.from_text(text)

    def list_all(self) -> Iterator[str]:
        if self.fail_list:
            raise StorageFailureError("list failed")
        with self._lock:
            ids = list(self._texts)
        yield from ids

    def delete(self, file_id: str) -> None:
        self.delete_calls += 1
        if file_id in self.fail_delete:
            raise StorageFailureError(f"delete failed for {file_id}")
        with self._lock:
            self._texts.pop(file_id, None)

    def __contains__(self, file_id: str) -> bool:
        with self._lock:
            return file_id in self._texts


class InMemoryBlobStore(BlobStore):

    def __init__(self):
        self._blobs: Dict[str, bytes] = {}
        self._lock = threading.Lock()
        self.fail_save = False
        self.fail_delete: Set[str] = set()

    def save(self, file_id: str, content: BinaryIO) -> int:
        if self.fail_save:
            raise StorageFailureError(f"save failed for {file_id}")
        data = content.read()
        with self._lock:
            self._blobs[file_id] = data
        return len(data)

    def open(self, file_id: str) -> BinaryIO:
        with self._lock:
            data = self._blobs.get(file_id)
        if data is None:
            raise RecordNotFoundError(f"no blob {file_id}")
        return BytesIO(data)

    def exists(self, file_id: str) -> bool:
        with self._lock:
            return file_id in self._blobs

    def get_size(self, file_id: str) -> Optional[int]:
        with self._lock:
            data = self._blobs.get(file_id)
        return None if data is None else len(data)

    def delete(self, file_id: str) -> None:
        if file_id in self.fail_delete:
            raise StorageFailureError(f"delete failed for {file_id}")
        with self._lock:
            self._blobs.pop(file_id, None)

    def __contains__(self, file_id: str) -> bool:
        return self.exists(file_id)
