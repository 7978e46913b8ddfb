"""
Ingestion Service

Persists uploaded files and their metadata records, computing each
file's expiry deadline from the requested duration.
"""

import logging
from typing import BinaryIO, Callable, Iterable, List, Optional, Tuple

from filedrop.domain.errors import StorageFailureError
from filedrop.domain.file_storage.entities import UploadedFile, now_millis
from filedrop.domain.file_storage.repositories import BlobStore, MetadataStore
from filedrop.domain.file_storage.value_objects import ExpiryMinutes, FileId

logger = logging.getLogger(__name__)


class IngestionService:
    """
    Application service for accepting uploads.

    Writes the bytes first and the record second, so a record never points
    at a file that is still being written. The expiry cache is left alone:
    the sweeper discovers new records on its own.
    """

    def __init__(
        self,
        metadata_store: MetadataStore,
        blob_store: BlobStore,
        clock: Callable[[], int] = now_millis,
    ):
        self.metadata_store = metadata_store
        self.blob_store = blob_store
        self._clock = clock

    def ingest(
        self,
        uploads: Iterable[Tuple[Optional[str], BinaryIO]],
        raw_expire: Optional[str] = None,
    ) -> List[UploadedFile]:
        """
        Store every named upload of one request.

        Parts without a filename are skipped. If any file fails to persist,
        the files already stored for this request are removed again and the
        error is re-raised.

        Args:
            uploads: (filename, stream) pairs from the parsed form
            raw_expire: The raw `expire` form value in minutes

        Returns:
            Accepted files in upload order

        Raises:
            StorageFailureError: If a file or record cannot be written
        """
        expiry = ExpiryMinutes.from_raw(raw_expire)
        accepted: List[UploadedFile] = []

        for filename, stream in uploads:
            display_name = _display_name(filename)
            if not display_name:
                continue
            try:
                accepted.append(self.store_file(display_name, stream, expiry))
            except StorageFailureError:
                for uploaded in accepted:
                    self._discard(uploaded.file_id)
                raise

        return accepted

    def store_file(self, filename: str, stream: BinaryIO, expiry: ExpiryMinutes) -> UploadedFile:
        """
        Persist one file and its record.

        Raises:
            StorageFailureError: If either write fails
        """
        file_id = FileId.generate().value
        size = self.blob_store.save(file_id, stream)

        expire_at = self._clock() + expiry.to_millis()
        uploaded = UploadedFile(
            file_id=file_id, filename=filename, size=size, expire_at=expire_at
        )

        try:
            self.metadata_store.put(file_id, uploaded.to_record())
        except StorageFailureError:
            self._discard(file_id)
            raise

        logger.info(f"File uploaded: {filename} ({size} bytes)")
        return uploaded

    def _discard(self, file_id: str) -> None:
        for store in (self.blob_store, self.metadata_store):
            try:
                store.delete(file_id)
            except StorageFailureError as e:
                logger.warning(f"Could not roll back {file_id}: {e}")


def _display_name(filename: Optional[str]) -> str:
    """Last path component of a client-supplied filename."""
    if not filename:
        return ""
    return filename.replace("\\", "/").rsplit("/", 1)[-1].strip()
