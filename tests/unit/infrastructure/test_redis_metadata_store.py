"""
Unit tests for RedisMetadataStore with a mocked Redis client.
"""

from unittest.mock import Mock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from filedrop.domain.errors import RecordNotFoundError, StorageFailureError
from filedrop.domain.file_storage.entities import FileRecord
from filedrop.infrastructure.redis_metadata_store import RedisMetadataStore


@pytest.fixture
def redis_client():
    return Mock()


@pytest.fixture
def store(redis_client):
    return RedisMetadataStore(redis_client)


class TestRedisMetadataStore:

    def test_put_writes_record_text(self, store, redis_client):
        store.put("abc", FileRecord(filename="a.txt", expire_at=42))

        redis_client.set.assert_called_once_with("file_info:abc", b"filename:a.txt\nexpire:42")

    def test_put_rejects_invalid_id(self, store, redis_client):
        with pytest.raises(StorageFailureError):
            store.put("../x", FileRecord())
        redis_client.set.assert_not_called()

    def test_get_parses_bytes(self, store, redis_client):
        redis_client.get.return_value = b"filename:a.txt\nexpire:42"

        record = store.get("abc")

        redis_client.get.assert_called_once_with("file_info:abc")
        assert record.filename == "a.txt"
        assert record.expire_at == 42

    def test_get_missing_key(self, store, redis_client):
        redis_client.get.return_value = None
        with pytest.raises(RecordNotFoundError):
            store.get("abc")

    def test_connection_error_maps_to_storage_failure(self, store, redis_client):
        redis_client.get.side_effect = RedisConnectionError("down")
        with pytest.raises(StorageFailureError):
            store.get("abc")

    def test_list_all_strips_prefix(self, store, redis_client):
        redis_client.scan_iter.return_value = iter([b"file_info:abc", "file_info:def", b"file_info:bad/id"])

        assert list(store.list_all()) == ["abc", "def"]
        redis_client.scan_iter.assert_called_once_with(match="file_info:*", count=500)

    def test_list_all_error(self, store, redis_client):
        redis_client.scan_iter.side_effect = RedisConnectionError("down")
        with pytest.raises(StorageFailureError):
            list(store.list_all())

    def test_delete(self, store, redis_client):
        store.delete("abc")
        redis_client.delete.assert_called_once_with("file_info:abc")

    def test_custom_prefix(self, redis_client):
        store = RedisMetadataStore(redis_client, key_prefix="drop")
        store.delete("abc")
        redis_client.delete.assert_called_once_with("drop:abc")

    def test_is_available(self, store, redis_client):
        redis_client.ping.return_value = True
        assert store.is_available() is True
        redis_client.ping.side_effect = RedisConnectionError("down")
        assert store.is_available() is False
