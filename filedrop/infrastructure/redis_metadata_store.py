"""
Redis Metadata Store

Redis-based implementation of MetadataStore for deployments where several
web processes share one record namespace. Records use the same `key:value`
text format as the filesystem backend, one string key per file id.
"""

import logging
from typing import Iterator

import redis
from redis.exceptions import RedisError

from filedrop.domain.errors import RecordNotFoundError, StorageFailureError
from filedrop.domain.file_storage.entities import FileRecord
from filedrop.domain.file_storage.repositories import MetadataStore
from filedrop.domain.file_storage.value_objects import FileId

logger = logging.getLogger(__name__)


class RedisMetadataStore(MetadataStore):
    """
    Stores FileRecords under `<key_prefix>:<file_id>`.

    Keys carry no Redis TTL: removal is left to the reclamation sweep so that
    the record and the stored bytes disappear together.
    """

    def __init__(self, redis_client: redis.Redis, key_prefix: str = "file_info"):
        """
        Initialize with a Redis client.

        Args:
            redis_client: Connected Redis client
            key_prefix: Namespace prefix for record keys
        """
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _make_key(self, file_id: str) -> str:
        return f"{self.key_prefix}:{file_id}"

    def put(self, file_id: str, record: FileRecord) -> None:
        if not FileId.is_valid(file_id):
            raise StorageFailureError(f"Refusing to store record under invalid id {file_id!r}")
        try:
            self.redis.set(self._make_key(file_id), record.to_text().encode("utf-8"))
        except RedisError as e:
            raise StorageFailureError(f"Failed to write record {file_id}: {e}", e) from e

    def get(self, file_id: str) -> FileRecord:
        if not FileId.is_valid(file_id):
            raise RecordNotFoundError(f"No record for invalid file id {file_id!r}")
        try:
            data = self.redis.get(self._make_key(file_id))
        except RedisError as e:
            raise StorageFailureError(f"Failed to read record {file_id}: {e}", e) from e

        if data is None:
            raise RecordNotFoundError(f"No record for file id {file_id}")
        if isinstance(data, bytes):
            data = data.decode("utf-8", errors="replace")
        return FileRecord.from_text(data)

    def list_all(self) -> Iterator[str]:
        prefix = f"{self.key_prefix}:"
        try:
            for key in self.redis.scan_iter(match=f"{prefix}*", count=500):
                if isinstance(key, bytes):
                    key = key.decode("utf-8", errors="replace")
                file_id = key[len(prefix):]
                if FileId.is_valid(file_id):
                    yield file_id
        except RedisError as e:
            raise StorageFailureError(f"Failed to list records: {e}", e) from e

    def delete(self, file_id: str) -> None:
        if not FileId.is_valid(file_id):
            return
        try:
            self.redis.delete(self._make_key(file_id))
        except RedisError as e:
            raise StorageFailureError(f"Failed to delete record {file_id}: {e}", e) from e

    def is_available(self) -> bool:
        try:
            return bool(self.redis.ping())
        except RedisError as e:
            logger.warning(f"Redis health check failed: {e}")
            return False
