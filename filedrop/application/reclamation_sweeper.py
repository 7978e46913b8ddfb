"""
Reclamation Sweeper

Periodic reconciliation of the expiry cache with the metadata store,
followed by deletion of expired files. This is the only component that
deletes stored files or records.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from filedrop.domain.errors import RecordNotFoundError, StorageFailureError
from filedrop.domain.file_storage.entities import FileRecord, now_millis
from filedrop.domain.file_storage.expiry_cache import ExpiryCache
from filedrop.domain.file_storage.repositories import BlobStore, MetadataStore

logger = logging.getLogger(__name__)

# An upload idle this long is treated as abandoned by a crashed writer
DEFAULT_STALE_WRITE_SECONDS = 3600.0


@dataclass
class SweepResult:
    """Outcome of one sweep run."""

    started_at: int
    finished_at: Optional[int] = None
    discovered: int = 0
    reclaimed: int = 0
    purged: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "discovered": self.discovered,
            "reclaimed": self.reclaimed,
            "purged": self.purged,
            "errors": list(self.errors),
        }


class ReclamationSweeper:
    """
    Runs discovery, reclamation and the stale write purge against the
    injected stores and cache.

    Discovery loads every record not yet cached, on a small thread pool, and
    waits for all loads before reclamation starts. Reclamation works on a
    snapshot of the cache, so a record discovered concurrently by an
    overlapping run is simply picked up on the next cycle.
    """

    def __init__(
        self,
        metadata_store: MetadataStore,
        blob_store: BlobStore,
        cache: ExpiryCache,
        expire_unparseable_records: bool = False,
        max_workers: int = 8,
        stale_write_seconds: float = DEFAULT_STALE_WRITE_SECONDS,
        clock: Callable[[], int] = now_millis,
    ):
        """
        Initialize the sweeper.

        Args:
            metadata_store: Durable record store to discover from
            blob_store: Store holding the file bytes
            cache: Process-wide expiry cache
            expire_unparseable_records: Treat records without a readable
                expiry as expired instead of keeping them forever
            max_workers: Upper bound on concurrent record loads
            stale_write_seconds: Age after which an abandoned temporary
                write is removed from the stores
            clock: Millisecond clock, injectable for tests
        """
        self.metadata_store = metadata_store
        self.blob_store = blob_store
        self.cache = cache
        self.expire_unparseable_records = expire_unparseable_records
        self.max_workers = max(1, max_workers)
        self.stale_write_seconds = stale_write_seconds
        self._clock = clock
        self.last_result: Optional[SweepResult] = None

    def run_once(self) -> SweepResult:
        """
        Run one full sweep. Never raises; failures are logged and reported.

        Returns:
            SweepResult with discovery and reclamation counts
        """
        result = SweepResult(started_at=self._clock())

        try:
            self.discover(result)
            self.reclaim(result)
            self.purge_stale_writes(result)
        except Exception as e:
            error_msg = f"Sweep failed: {e}"
            logger.error(error_msg, exc_info=True)
            result.errors.append(error_msg)

        result.finished_at = self._clock()
        self.last_result = result

        logger.info(
            f"Sweep completed - Discovered: {result.discovered}, "
            f"Reclaimed: {result.reclaimed}, Purged: {result.purged}, "
            f"Errors: {len(result.errors)}"
        )
        if result.errors:
            logger.warning(f"Sweep errors: {result.errors}")

        return result

    def discover(self, result: Optional[SweepResult] = None) -> int:
        """
        Load records that are in the metadata store but not in the cache.

        Returns:
            Number of records newly inserted into the cache
        """
        if result is None:
            result = SweepResult(started_at=self._clock())

        try:
            pending = [
                file_id for file_id in self.metadata_store.list_all()
                if not self.cache.has(file_id)
            ]
        except StorageFailureError as e:
            error_msg = f"Failed to enumerate records: {e}"
            logger.error(error_msg, exc_info=True)
            result.errors.append(error_msg)
            return 0

        if not pending:
            return 0

        discovered = 0
        workers = min(self.max_workers, len(pending))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="discovery") as executor:
            futures = {
                executor.submit(self.metadata_store.get, file_id): file_id
                for file_id in pending
            }
            for future in as_completed(futures):
                file_id = futures[future]
                try:
                    record = future.result()
                except RecordNotFoundError:
                    # Reclaimed by an overlapping sweep since listing
                    logger.debug(f"Record {file_id} vanished before it could be loaded")
                    continue
                except StorageFailureError as e:
                    error_msg = f"Failed to load record {file_id}: {e}"
                    logger.warning(error_msg)
                    result.errors.append(error_msg)
                    continue

                if self.cache.insert_if_absent(file_id, record):
                    discovered += 1
                    if not record.has_expiry():
                        logger.warning(f'Record "{file_id}" has no readable expiry')
                    logger.info(f'Added file "{file_id}" to info cache.')

        result.discovered += discovered
        return discovered

    def reclaim(self, result: Optional[SweepResult] = None) -> int:
        """
        Delete every cached file whose deadline has passed.

        The stored bytes go first and the record only once they are gone, so
        a record always exists while its bytes do. On any failure the entry
        still leaves the cache; the surviving record is rediscovered by the
        next sweep and the removal is retried.

        Returns:
            Number of files fully removed
        """
        if result is None:
            result = SweepResult(started_at=self._clock())

        now = self._clock()
        reclaimed = 0

        for file_id, record in self.cache.snapshot_entries().items():
            if not self._is_reclaimable(record, now):
                continue

            try:
                self.blob_store.delete(file_id)
                self.metadata_store.delete(file_id)
            except StorageFailureError as e:
                error_msg = f"Failed to remove expired file {file_id}: {e}"
                logger.warning(error_msg)
                result.errors.append(error_msg)
            else:
                reclaimed += 1
                logger.info(f'Removed expired file "{file_id}"')
            finally:
                self.cache.remove(file_id)

        result.reclaimed += reclaimed
        return reclaimed

    def purge_stale_writes(self, result: Optional[SweepResult] = None) -> int:
        """
        Remove temporary files left behind by writes that never completed.

        Returns:
            Number of temporary files removed
        """
        if result is None:
            result = SweepResult(started_at=self._clock())

        purged = 0
        for store in (self.blob_store, self.metadata_store):
            try:
                purged += store.purge_stale_writes(self.stale_write_seconds)
            except StorageFailureError as e:
                error_msg = f"Failed to purge stale writes: {e}"
                logger.warning(error_msg)
                result.errors.append(error_msg)

        if purged:
            logger.info(f"Purged {purged} abandoned temporary file(s)")
        result.purged += purged
        return purged

    def _is_reclaimable(self, record: FileRecord, now: int) -> bool:
        if not record.has_expiry():
            return self.expire_unparseable_records
        return record.is_expired(now)
