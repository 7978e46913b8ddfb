"""
File Storage Domain

Handles expiring file metadata, the expiry cache and storage contracts.
"""

from .entities import FileRecord, UploadedFile, now_millis
from .expiry_cache import ExpiryCache
from .repositories import BlobStore, MetadataStore
from .value_objects import (
    DEFAULT_EXPIRY_MINUTES,
    MAX_EXPIRY_MINUTES,
    MIN_EXPIRY_MINUTES,
    ExpiryMinutes,
    FileId,
)

__all__ = [
    "BlobStore",
    "DEFAULT_EXPIRY_MINUTES",
    "ExpiryCache",
    "ExpiryMinutes",
    "FileId",
    "FileRecord",
    "MAX_EXPIRY_MINUTES",
    "MIN_EXPIRY_MINUTES",
    "MetadataStore",
    "UploadedFile",
    "now_millis",
]
