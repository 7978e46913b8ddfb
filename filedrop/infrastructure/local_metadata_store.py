"""
Local Metadata Store

Filesystem implementation of MetadataStore. Each record is a small UTF-8
text file of `key:value` lines named after its file id, kept in a
dedicated directory.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator

from filedrop.domain.errors import RecordNotFoundError, StorageFailureError
from filedrop.domain.file_storage.entities import FileRecord
from filedrop.domain.file_storage.repositories import MetadataStore
from filedrop.domain.file_storage.value_objects import FileId
from filedrop.infrastructure.temp_files import remove_stale_temp_files

logger = logging.getLogger(__name__)


class LocalMetadataStore(MetadataStore):
    """
    Metadata records stored as files under info_dir.

    Writes go to a hidden temporary file that is renamed over the target,
    so a reader never sees a half-written record.
    """

    def __init__(self, info_dir: str):
        """
        Initialize the store, creating info_dir if needed.

        Args:
            info_dir: Directory holding one record file per file id
        """
        self.info_dir = Path(info_dir)
        try:
            self.info_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageFailureError(
                f"Failed to create metadata directory: {self.info_dir}", e
            ) from e

    def _path_for(self, file_id: str) -> Path:
        if not FileId.is_valid(file_id):
            raise RecordNotFoundError(f"No record for invalid file id {file_id!r}")
        return self.info_dir / file_id

    def put(self, file_id: str, record: FileRecord) -> None:
        target = self._path_for(file_id)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.info_dir, prefix=f".{file_id}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(record.to_text())
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, target)
        except OSError as e:
            if tmp_name is not None:
                _unlink_quietly(tmp_name)
            raise StorageFailureError(f"Failed to write record {file_id}: {e}", e) from e

    def get(self, file_id: str) -> FileRecord:
        path = self._path_for(file_id)
        try:
            data = path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError as e:
            raise RecordNotFoundError(f"No record for file id {file_id}", e) from e
        except IsADirectoryError as e:
            raise RecordNotFoundError(f"No record for file id {file_id}", e) from e
        except OSError as e:
            raise StorageFailureError(f"Failed to read record {file_id}: {e}", e) from e
        return FileRecord.from_text(data)

    def list_all(self) -> Iterator[str]:
        try:
            entries = os.scandir(self.info_dir)
        except OSError as e:
            raise StorageFailureError(f"Failed to list {self.info_dir}: {e}", e) from e

        with entries:
            for entry in entries:
                # Hidden names are in-flight temporary writes
                if entry.name.startswith("."):
                    continue
                if not FileId.is_valid(entry.name):
                    continue
                yield entry.name

    def delete(self, file_id: str) -> None:
        if not FileId.is_valid(file_id):
            return
        try:
            (self.info_dir / file_id).unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageFailureError(f"Failed to delete record {file_id}: {e}", e) from e

    def is_available(self) -> bool:
        return self.info_dir.is_dir() and os.access(self.info_dir, os.W_OK)

    def purge_stale_writes(self, max_age_seconds: float) -> int:
        return remove_stale_temp_files(self.info_dir, ".tmp", max_age_seconds)


def _unlink_quietly(path: str) -> None:
    try:
        os.unlink(path)
    except OSError:
        logger.debug(f"Could not remove temporary file {path}")
