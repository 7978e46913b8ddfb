"""
Infrastructure Layer

Concrete storage implementations for the domain repository contracts.
"""

from .local_blob_store import LocalBlobStore
from .local_metadata_store import LocalMetadataStore
from .storage_factory import StorageFactory

__all__ = [
    "LocalBlobStore",
    "LocalMetadataStore",
    "StorageFactory",
]
