"""
Retrieval Service

Resolves a file id to its stored bytes for download, and describes stored
files for the JSON API.
"""

import logging
import mimetypes
import posixpath
from dataclasses import dataclass
from typing import BinaryIO, Optional

from filedrop.domain.errors import RecordNotFoundError, StorageFailureError
from filedrop.domain.file_storage.entities import FileRecord, UploadedFile
from filedrop.domain.file_storage.expiry_cache import ExpiryCache
from filedrop.domain.file_storage.repositories import BlobStore, MetadataStore

logger = logging.getLogger(__name__)

DEFAULT_MIMETYPE = "application/octet-stream"


@dataclass
class DownloadTarget:
    """An opened stored file ready to be streamed. The caller closes `stream`."""

    file_id: str
    download_name: str
    mimetype: str
    stream: BinaryIO
    size: Optional[int] = None


class RetrievalService:
    """
    Application service for downloads.

    Existence is decided by the blob store alone. The expiry cache is never
    consulted for downloads, so a file that has not been swept into the
    cache yet is still served, and so is one whose deadline has passed but
    which has not been reclaimed.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        metadata_store: MetadataStore,
        cache: Optional[ExpiryCache] = None,
    ):
        self.blob_store = blob_store
        self.metadata_store = metadata_store
        self.cache = cache

    def open_download(self, file_id: Optional[str], requested_name: Optional[str] = None) -> DownloadTarget:
        """
        Open a stored file for streaming.

        Args:
            file_id: Value of the `id` query parameter
            requested_name: Decoded `<name>` path segment of the download URL

        Returns:
            DownloadTarget with an open stream

        Raises:
            RecordNotFoundError: If the id is missing or nothing is stored
            StorageFailureError: If the file exists but cannot be opened
        """
        if not file_id:
            raise RecordNotFoundError("No file id given")

        # Opening doubles as the existence check
        stream = self.blob_store.open(file_id)

        download_name = self._resolve_download_name(file_id, requested_name)
        mimetype = mimetypes.guess_type(download_name)[0] or DEFAULT_MIMETYPE

        return DownloadTarget(
            file_id=file_id,
            download_name=download_name,
            mimetype=mimetype,
            stream=stream,
            size=self.blob_store.get_size(file_id),
        )

    def describe(self, file_id: str) -> dict:
        """
        Get file information for API response.

        Raises:
            RecordNotFoundError: If neither a record nor stored bytes exist
            StorageFailureError: If the record cannot be read
        """
        record: Optional[FileRecord]
        try:
            record = self.metadata_store.get(file_id)
        except RecordNotFoundError:
            record = None

        size = self.blob_store.get_size(file_id)
        if record is None and size is None:
            raise RecordNotFoundError(f"No file stored for id {file_id}")
        if record is None:
            record = FileRecord()

        expires_at = record.expires_at_datetime()
        filename = record.filename or file_id
        download_url = None
        if size is not None:
            download_url = UploadedFile(
                file_id=file_id,
                filename=filename,
                size=size,
                expire_at=record.expire_at or 0,
            ).download_link()

        return {
            "file_id": file_id,
            "filename": record.filename,
            "expire_at": record.expire_at,
            "expires_at": expires_at.isoformat() if expires_at else None,
            "remaining_seconds": record.get_remaining_seconds(),
            "size": size,
            "cached": self.cache.has(file_id) if self.cache is not None else False,
            "download_url": download_url,
        }

    def _resolve_download_name(self, file_id: str, requested_name: Optional[str]) -> str:
        name = posixpath.basename((requested_name or "").replace("\\", "/")).strip()
        if name:
            return name

        try:
            record = self.metadata_store.get(file_id)
        except (RecordNotFoundError, StorageFailureError) as e:
            logger.debug(f"No stored filename for {file_id}: {e}")
            return file_id
        return record.filename or file_id
