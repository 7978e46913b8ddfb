"""
Storage Factory

Selects the metadata and blob store implementations from configuration,
so the application layer depends only on the MetadataStore and BlobStore
contracts.
"""

import logging

from filedrop.config.settings import (
    METADATA_BACKEND_LOCAL,
    METADATA_BACKEND_REDIS,
    AppConfig,
)
from filedrop.domain.file_storage.repositories import BlobStore, MetadataStore
from filedrop.infrastructure.local_blob_store import LocalBlobStore
from filedrop.infrastructure.local_metadata_store import LocalMetadataStore

logger = logging.getLogger(__name__)


class StorageFactory:
    """
    Factory for storage implementations.

    Selection Logic:
    - Stored bytes always live on the local filesystem under <data_dir>/file
    - FILEDROP_METADATA_BACKEND=redis keeps records in Redis
    - Otherwise records live under <data_dir>/info
    """

    @staticmethod
    def create_blob_store(config: AppConfig) -> BlobStore:
        """
        Create the blob store for uploaded bytes.

        Raises:
            StorageFailureError: If the storage directory cannot be created
        """
        store = LocalBlobStore(str(config.file_dir))
        logger.info(f"Storage factory: storing files at {config.file_dir}")
        return store

    @staticmethod
    def create_metadata_store(config: AppConfig) -> MetadataStore:
        """
        Create the metadata store selected by configuration.

        Raises:
            ValueError: If the configured backend is unknown
            StorageFailureError: If the local records directory cannot be created
        """
        backend = config.metadata_backend

        if backend == METADATA_BACKEND_REDIS:
            return StorageFactory._create_redis_metadata_store()
        if backend == METADATA_BACKEND_LOCAL:
            store = LocalMetadataStore(str(config.info_dir))
            logger.info(f"Storage factory: storing records at {config.info_dir}")
            return store

        raise ValueError(f"Unknown metadata backend: {backend!r}")

    @staticmethod
    def _create_redis_metadata_store() -> MetadataStore:
        from filedrop.config.redis_config import RedisConfig, create_redis_client
        from filedrop.infrastructure.redis_metadata_store import RedisMetadataStore

        redis_config = RedisConfig()
        client = create_redis_client(redis_config)
        logger.info(
            f"Storage factory: storing records in Redis at "
            f"{redis_config.host}:{redis_config.port}/{redis_config.db}"
        )
        return RedisMetadataStore(client, key_prefix=redis_config.key_prefix)
