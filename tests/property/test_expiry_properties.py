"""
Property-based tests for expiry parsing, file ids and the record format.
"""

from hypothesis import given
from hypothesis import strategies as st

from filedrop.domain.file_storage.entities import FileRecord
from filedrop.domain.file_storage.value_objects import (
    DEFAULT_EXPIRY_MINUTES,
    MAX_EXPIRY_MINUTES,
    MIN_EXPIRY_MINUTES,
    ExpiryMinutes,
    FileId,
)
from tests.property.strategies import (
    file_ids,
    file_records,
    non_numeric_expiry,
    numeric_expiry_strings,
)


class TestExpiryProperties:

    @given(st.one_of(numeric_expiry_strings(), non_numeric_expiry(), st.text(max_size=30)))
    def test_expiry_always_within_bounds(self, raw):
        minutes = ExpiryMinutes.from_raw(raw).value
        assert MIN_EXPIRY_MINUTES <= minutes <= MAX_EXPIRY_MINUTES

    @given(non_numeric_expiry())
    def test_non_numeric_uses_default(self, raw):
        assert ExpiryMinutes.from_raw(raw).value == DEFAULT_EXPIRY_MINUTES

    @given(numeric_expiry_strings())
    def test_numeric_is_clamped(self, raw):
        value = int(raw.rstrip(" abcmin").split(".")[0])
        expected = DEFAULT_EXPIRY_MINUTES if value == 0 else min(MAX_EXPIRY_MINUTES, max(MIN_EXPIRY_MINUTES, value))
        assert ExpiryMinutes.from_raw(raw).value == expected

    @given(st.integers(min_value=MIN_EXPIRY_MINUTES, max_value=MAX_EXPIRY_MINUTES))
    def test_in_range_values_are_kept(self, minutes):
        assert ExpiryMinutes.from_raw(str(minutes)).to_millis() == minutes * 60_000


class TestFileIdProperties:

    @given(file_ids)
    def test_safe_alphabet_is_accepted(self, value):
        assert FileId.is_valid(value)

    @given(st.tuples(file_ids, st.sampled_from(["/", ".", "..", "\\"]), file_ids).map("".join))
    def test_path_characters_are_rejected(self, value):
        assert not FileId.is_valid(value)


class TestRecordProperties:

    @given(file_records())
    def test_record_text_round_trip(self, record):
        parsed = FileRecord.from_text(record.to_text())

        assert parsed.filename == record.filename
        assert parsed.expire_at == record.expire_at
        assert parsed.extra == record.extra

    @given(st.text(max_size=200))
    def test_parsing_never_raises(self, text):
        record = FileRecord.from_text(text)
        assert record.expire_at is None or isinstance(record.expire_at, int)
