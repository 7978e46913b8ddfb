"""
File Storage Value Objects

Immutable value objects for type safety and validation.
"""

import re
import secrets
from dataclasses import dataclass
from typing import Optional

from filedrop.domain.errors import InvalidFileIdError

MIN_EXPIRY_MINUTES = 1
MAX_EXPIRY_MINUTES = 7 * 24 * 60
DEFAULT_EXPIRY_MINUTES = 15

MILLIS_PER_MINUTE = 60_000

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_FILE_ID_CHARS = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass(frozen=True)
class FileId:
    """
    Value object representing an opaque, filesystem-safe file identifier.

    Generated ids are 32 lowercase hex characters. Any id made only of
    letters, digits, hyphens and underscores is accepted so that ids written
    by older deployments stay addressable.
    """
    value: str

    def __post_init__(self):
        if not self.is_valid(self.value):
            raise InvalidFileIdError(f"Invalid file id: {self.value!r}")

    @staticmethod
    def is_valid(value) -> bool:
        """Check whether a raw string is usable as a storage key."""
        if not value or not isinstance(value, str):
            return False
        if len(value) > 128:
            return False
        return bool(_FILE_ID_CHARS.match(value))

    @classmethod
    def generate(cls) -> 'FileId':
        """Generate a new random file id."""
        return cls(secrets.token_hex(16))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ExpiryMinutes:
    """
    Value object for a requested expiry duration, always within bounds.

    Use from_raw() to turn untrusted form input into a safe value.
    """
    value: int

    def __post_init__(self):
        if not MIN_EXPIRY_MINUTES <= self.value <= MAX_EXPIRY_MINUTES:
            raise ValueError(
                f"Expiry must be between {MIN_EXPIRY_MINUTES} and "
                f"{MAX_EXPIRY_MINUTES} minutes, got {self.value}"
            )

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> 'ExpiryMinutes':
        """
        Parse the `expire` form field, falling back and clamping as needed.

        The leading integer of the string is used ("12abc" -> 12). Missing,
        non-numeric and zero values use the default. Anything else is clamped
        into [MIN_EXPIRY_MINUTES, MAX_EXPIRY_MINUTES].

        Args:
            raw: Raw form value, possibly None

        Returns:
            ExpiryMinutes within bounds
        """
        minutes = _parse_leading_int(raw)
        if not minutes:
            minutes = DEFAULT_EXPIRY_MINUTES
        return cls(clamp_minutes(minutes))

    def to_millis(self) -> int:
        return self.value * MILLIS_PER_MINUTE

    def __int__(self) -> int:
        return self.value


def clamp_minutes(minutes: int) -> int:
    """Clamp a minute count into the allowed expiry range."""
    return min(MAX_EXPIRY_MINUTES, max(MIN_EXPIRY_MINUTES, minutes))


def _parse_leading_int(raw) -> Optional[int]:
    if raw is None:
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    match = _LEADING_INT.match(str(raw))
    if not match:
        return None
    return int(match.group(1))
