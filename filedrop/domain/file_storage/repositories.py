"""
File Storage Repository Interfaces

Abstract contracts for the two durable namespaces of the service: the
metadata records and the stored file bytes. Infrastructure implementations
depend on these domain-defined contracts, not the other way round.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Iterator, Optional

from .entities import FileRecord


class MetadataStore(ABC):
    """
    Durable source of truth for FileRecords, one per file id.

    Contract Guarantees:
    - put() survives a process restart once it returns
    - get() raises RecordNotFoundError for unknown ids
    - list_all() re-enumerates the namespace on every call
    - delete() succeeds when the record is already absent
    - I/O problems raise StorageFailureError
    """

    @abstractmethod
    def put(self, file_id: str, record: FileRecord) -> None:
        """
        Durably persist a record under file_id, replacing any previous one.

        Raises:
            StorageFailureError: If the write fails
        """
        pass  # pragma: no cover

    @abstractmethod
    def get(self, file_id: str) -> FileRecord:
        """
        Read and leniently parse the record for file_id.

        Raises:
            RecordNotFoundError: If no record exists
            StorageFailureError: If the read fails
        """
        pass  # pragma: no cover

    @abstractmethod
    def list_all(self) -> Iterator[str]:
        """
        Lazily yield the ids of all known records.

        Raises:
            StorageFailureError: If the namespace cannot be enumerated
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, file_id: str) -> None:
        """
        Remove the record for file_id. Idempotent.

        Raises:
            StorageFailureError: If the delete fails for a reason other
                than the record being absent
        """
        pass  # pragma: no cover

    def is_available(self) -> bool:
        """Whether the backing namespace is reachable."""
        return True

    def purge_stale_writes(self, max_age_seconds: float) -> int:
        """Remove temporary writes older than max_age_seconds. Returns the count."""
        return 0


class BlobStore(ABC):
    """
    Storage for the uploaded bytes, keyed by file id.

    Implementation Requirements:
    - save(): the blob must not become visible before it is complete
    - open(): raises RecordNotFoundError for missing or invalid ids
    - exists(): never raises
    - delete(): idempotent
    """

    @abstractmethod
    def save(self, file_id: str, content: BinaryIO) -> int:
        """
        Stream content into storage under file_id.

        Returns:
            Number of bytes written

        Raises:
            StorageFailureError: If the write fails
        """
        pass  # pragma: no cover

    @abstractmethod
    def open(self, file_id: str) -> BinaryIO:
        """
        Open the stored bytes for reading. The caller closes the stream.

        Raises:
            RecordNotFoundError: If nothing is stored under file_id
        """
        pass  # pragma: no cover

    @abstractmethod
    def exists(self, file_id: str) -> bool:
        pass  # pragma: no cover

    @abstractmethod
    def get_size(self, file_id: str) -> Optional[int]:
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, file_id: str) -> None:
        """
        Remove the stored bytes. Idempotent.

        Raises:
            StorageFailureError: If the delete fails
        """
        pass  # pragma: no cover

    def purge_stale_writes(self, max_age_seconds: float) -> int:
        """Remove partial uploads older than max_age_seconds. Returns the count."""
        return 0
