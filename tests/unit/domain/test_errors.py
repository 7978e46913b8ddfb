"""
Unit tests for error categories and structured error responses.
"""

import logging

import pytest

from filedrop.domain.errors import (
    ERROR_MESSAGES,
    ApplicationError,
    DomainError,
    ErrorCategory,
    InvalidFileIdError,
    RecordNotFoundError,
    StorageFailureError,
    UploadParseError,
    create_error_response,
)


class TestDomainErrors:

    @pytest.mark.parametrize(
        "error_class",
        [StorageFailureError, RecordNotFoundError, InvalidFileIdError, UploadParseError],
    )
    def test_subclasses_domain_error(self, error_class):
        assert issubclass(error_class, DomainError)

    def test_wraps_original_error(self):
        cause = OSError("disk full")
        error = StorageFailureError("write failed", cause)
        assert str(error) == "write failed"
        assert error.original_error is cause


class TestApplicationError:

    def test_every_category_has_messages(self):
        for category in ErrorCategory:
            assert set(ERROR_MESSAGES[category]) == {"title", "message", "action"}

    def test_to_dict(self):
        error = ApplicationError(ErrorCategory.FILE_NOT_FOUND, "no record abc")
        result = error.to_dict()
        assert result["error"] == "file_not_found"
        assert result["title"] == "File Not Found"
        assert "technical_message" not in result

    def test_create_error_response(self):
        body, status = create_error_response(ErrorCategory.STORAGE_FAILURE, status_code=503)
        assert status == 503
        assert body["error"] == "storage_failure"

    def test_technical_message_is_logged_not_returned(self, caplog):
        with caplog.at_level(logging.INFO, logger="filedrop.domain.errors"):
            body, status = create_error_response(
                ErrorCategory.FILE_NOT_FOUND, "no record for abc", status_code=404
            )

        assert status == 404
        assert "no record for abc" in caplog.text
        assert "no record for abc" not in str(body)

    def test_categories_are_the_ones_the_api_returns(self):
        assert {c.value for c in ErrorCategory} == {
            "file_not_found", "storage_failure", "system_error",
        }
