"""
File Storage Entities

Domain entities for uploaded file metadata and expiry tracking.
"""

import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional
from urllib.parse import quote

FILENAME_FIELD = "filename"
EXPIRE_FIELD = "expire"

# Characters encodeURIComponent leaves alone besides the ones quote() keeps.
_LINK_SAFE_CHARS = "!*'()"
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def now_millis() -> int:
    """Current wall-clock time as a millisecond epoch timestamp."""
    return int(time.time() * 1000)


@dataclass
class FileRecord:
    """
    Persisted metadata for one stored file.

    Parsing is lenient: a field that cannot be read is None rather than a
    default value, so a record without a usable expiry is distinguishable
    from one that has already expired. Unknown fields are kept in `extra`
    and written back unchanged.
    """
    filename: Optional[str] = None
    expire_at: Optional[int] = None
    extra: Dict[str, str] = field(default_factory=dict)

    def has_expiry(self) -> bool:
        return self.expire_at is not None

    def is_expired(self, now_ms: Optional[int] = None) -> bool:
        """
        Check if the record's deadline has passed.

        Records without a known expiry never report expired.
        """
        if self.expire_at is None:
            return False
        if now_ms is None:
            now_ms = now_millis()
        return now_ms > self.expire_at

    def get_remaining_seconds(self, now_ms: Optional[int] = None) -> Optional[int]:
        """Seconds until expiry (0 once expired), None if unknown."""
        if self.expire_at is None:
            return None
        if now_ms is None:
            now_ms = now_millis()
        return max(0, (self.expire_at - now_ms) // 1000)

    def expires_at_datetime(self) -> Optional[datetime]:
        if self.expire_at is None:
            return None
        return datetime.fromtimestamp(self.expire_at / 1000, tz=timezone.utc)

    def to_text(self) -> str:
        """Serialize as `key:value` lines."""
        lines = []
        if self.filename is not None:
            lines.append(f"{FILENAME_FIELD}:{_single_line(self.filename)}")
        if self.expire_at is not None:
            lines.append(f"{EXPIRE_FIELD}:{self.expire_at}")
        for key, value in self.extra.items():
            lines.append(f"{key}:{_single_line(value)}")
        return "\n".join(lines)

    @classmethod
    def from_text(cls, data: str) -> 'FileRecord':
        """
        Parse `key:value` lines.

        Each line is split on its first colon; lines without one are ignored.
        A later duplicate key overrides an earlier one.
        """
        fields: Dict[str, str] = {}
        for line in data.split("\n"):
            key, sep, value = line.partition(":")
            if not sep:
                continue
            fields[key] = value.rstrip("\r")

        filename = fields.pop(FILENAME_FIELD, None)
        expire_at = _parse_millis(fields.pop(EXPIRE_FIELD, None))
        return cls(filename=filename, expire_at=expire_at, extra=fields)


@dataclass
class UploadedFile:
    """An accepted upload, as reported back to the uploader."""
    file_id: str
    filename: str
    size: int
    expire_at: int

    def download_link(self, base_url: str = "/file") -> str:
        """Link of the form /file/<urlencoded-filename>?id=<fileId>."""
        encoded = quote(self.filename, safe=_LINK_SAFE_CHARS)
        return f"{base_url}/{encoded}?id={self.file_id}"

    def expires_at_local(self) -> datetime:
        return datetime.fromtimestamp(self.expire_at / 1000)

    def to_record(self) -> FileRecord:
        return FileRecord(filename=self.filename, expire_at=self.expire_at)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "file_id": self.file_id,
            "filename": self.filename,
            "size": self.size,
            "expire_at": self.expire_at,
            "download_url": self.download_link(),
        }


def _parse_millis(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    if not match:
        return None
    return int(match.group(1))


def _single_line(value: str) -> str:
    return value.replace("\r", " ").replace("\n", " ")
