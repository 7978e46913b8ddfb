"""
Unit tests for ExpiryCache.
"""

import threading

from filedrop.domain.file_storage.entities import FileRecord
from filedrop.domain.file_storage.expiry_cache import ExpiryCache


class TestExpiryCache:

    def test_insert_if_absent_inserts_once(self, cache):
        first = FileRecord(filename="a.txt", expire_at=1)
        second = FileRecord(filename="b.txt", expire_at=2)

        assert cache.insert_if_absent("id1", first) is True
        assert cache.insert_if_absent("id1", second) is False
        assert cache.get("id1") is first

    def test_remove_unknown_id_is_noop(self, cache):
        assert cache.remove("missing") is False
        assert len(cache) == 0

    def test_remove_existing(self, cache):
        cache.insert_if_absent("id1", FileRecord())
        assert cache.remove("id1") is True
        assert "id1" not in cache

    def test_snapshot_is_independent_copy(self, cache):
        cache.insert_if_absent("id1", FileRecord())
        snapshot = cache.snapshot_entries()
        cache.insert_if_absent("id2", FileRecord())
        cache.remove("id1")

        assert list(snapshot) == ["id1"]
        assert set(cache.snapshot_entries()) == {"id2"}

    def test_clear(self, cache):
        cache.insert_if_absent("id1", FileRecord())
        cache.clear()
        assert len(cache) == 0

    def test_concurrent_inserts_keep_first_writer(self):
        cache = ExpiryCache()
        winners = []
        barrier = threading.Barrier(8)

        def worker(n):
            barrier.wait()
            if cache.insert_if_absent("shared", FileRecord(filename=str(n))):
                winners.append(n)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(winners) == 1
        assert cache.get("shared").filename == str(winners[0])

    def test_concurrent_insert_and_remove(self):
        cache = ExpiryCache()

        def inserter():
            for i in range(500):
                cache.insert_if_absent(f"id{i}", FileRecord())

        def remover():
            for i in range(500):
                cache.remove(f"id{i}")
                cache.snapshot_entries()

        threads = [threading.Thread(target=inserter), threading.Thread(target=remover)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        for file_id in cache.snapshot_entries():
            assert cache.has(file_id)
