"""
Local Blob Store

Concrete implementation of BlobStore for the local filesystem, storing the
uploaded bytes of each file under its file id.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, Optional

from filedrop.domain.errors import RecordNotFoundError, StorageFailureError
from filedrop.domain.file_storage.repositories import BlobStore
from filedrop.domain.file_storage.value_objects import FileId
from filedrop.infrastructure.temp_files import remove_stale_temp_files

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class LocalBlobStore(BlobStore):
    """
    Local filesystem implementation of BlobStore.

    Uploads are streamed into a hidden temporary file in the same directory
    and renamed into place once complete, so a file id never resolves to a
    partially written blob.

    Attributes:
        base_path: Directory holding one file per file id
    """

    def __init__(self, base_path: str):
        """
        Initialize the blob store.

        Args:
            base_path: Directory for stored files, created if missing

        Raises:
            StorageFailureError: If the directory cannot be created
        """
        self.base_path = Path(base_path)
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageFailureError(
                f"Failed to create storage directory: {self.base_path}", e
            ) from e

    def _path_for(self, file_id: str) -> Optional[Path]:
        if not FileId.is_valid(file_id):
            return None
        return self.base_path / file_id

    def save(self, file_id: str, content: BinaryIO) -> int:
        target = self._path_for(file_id)
        if target is None:
            raise StorageFailureError(f"Refusing to store under invalid file id {file_id!r}")

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.base_path, prefix=f".{file_id}.", suffix=".part"
            )
            with os.fdopen(fd, "wb") as f:
                shutil.copyfileobj(content, f, CHUNK_SIZE)
                f.flush()
                os.fsync(f.fileno())
                size = f.tell()
            os.replace(tmp_name, target)
            return size
        except OSError as e:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug(f"Could not remove partial upload {tmp_name}")
            raise StorageFailureError(f"Failed to save file {file_id}: {e}", e) from e

    def open(self, file_id: str) -> BinaryIO:
        path = self._path_for(file_id)
        if path is None:
            raise RecordNotFoundError(f"No file stored for invalid id {file_id!r}")
        try:
            return open(path, "rb")
        except (FileNotFoundError, IsADirectoryError) as e:
            raise RecordNotFoundError(f"No file stored for id {file_id}", e) from e
        except OSError as e:
            raise StorageFailureError(f"Failed to open file {file_id}: {e}", e) from e

    def exists(self, file_id: str) -> bool:
        path = self._path_for(file_id)
        if path is None:
            return False
        try:
            return path.is_file()
        except OSError:
            return False

    def get_size(self, file_id: str) -> Optional[int]:
        path = self._path_for(file_id)
        if path is None:
            return None
        try:
            if not path.is_file():
                return None
            return path.stat().st_size
        except OSError:
            return None

    def delete(self, file_id: str) -> None:
        path = self._path_for(file_id)
        if path is None:
            return
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageFailureError(f"Failed to delete file {file_id}: {e}", e) from e

    def is_available(self) -> bool:
        return self.base_path.exists() and os.access(self.base_path, os.W_OK)

    def purge_stale_writes(self, max_age_seconds: float) -> int:
        return remove_stale_temp_files(self.base_path, ".part", max_age_seconds)
