"""
Cleanup of temporary files left behind by interrupted writes.
"""

import logging
import os
import time
from pathlib import Path

from filedrop.domain.errors import StorageFailureError

logger = logging.getLogger(__name__)


def remove_stale_temp_files(directory: Path, suffix: str, max_age_seconds: float) -> int:
    """
    Delete hidden files ending in suffix whose last change is older than max_age_seconds.

    Returns:
        Number of files removed

    Raises:
        StorageFailureError: If the directory cannot be listed
    """
    cutoff = time.time() - max_age_seconds
    removed = 0

    try:
        entries = os.scandir(directory)
    except OSError as e:
        raise StorageFailureError(f"Failed to list {directory}: {e}", e) from e

    with entries:
        for entry in entries:
            if not (entry.name.startswith(".") and entry.name.endswith(suffix)):
                continue
            try:
                if not entry.is_file(follow_symlinks=False):
                    continue
                if entry.stat(follow_symlinks=False).st_mtime >= cutoff:
                    continue
                os.unlink(entry.path)
            except FileNotFoundError:
                # Finished or cleaned up by another sweep meanwhile
                continue
            except OSError as e:
                logger.warning(f"Could not remove stale temporary file {entry.path}: {e}")
                continue
            removed += 1
            logger.debug(f"Removed stale temporary file {entry.path}")

    return removed
