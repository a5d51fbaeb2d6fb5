"""Tests for error types and codes."""

import pytest

from dbdiagram.core.errors import (
    ConfigError,
    DiagramError,
    ErrorCode,
    InternalError,
    ParseError,
    PatchError,
    RenderError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.PARSE_UNSUPPORTED_FORMAT, 3000),
            (ErrorCode.RENDER_FAILED, 4000),
            (ErrorCode.PATCH_TARGET_NOT_FOUND, 5000),
            (ErrorCode.PATCH_NOT_WRITABLE, 5000),
            (ErrorCode.INTERNAL_ERROR, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        assert expected_range <= code.value < expected_range + 1000


class TestDiagramError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = DiagramError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        """Error string representation is human readable."""
        error = DiagramError(code=ErrorCode.INTERNAL_ERROR, message="Something broke")

        assert str(error) == "[9001] INTERNAL_ERROR: Something broke"

    def test_given_subclass_when_raised_then_caught_as_base(self) -> None:
        """Every error type can be handled through DiagramError."""
        with pytest.raises(DiagramError):
            raise PatchError.target_not_found("table", "users")


class TestFactories:
    """Factory method tests."""

    def test_config_parse_error(self) -> None:
        """parse_error carries path and reason."""
        error = ConfigError.parse_error("/path/config.yaml", "bad indent")

        assert error.code == ErrorCode.CONFIG_PARSE_ERROR
        assert "/path/config.yaml" in error.message
        assert error.details["reason"] == "bad indent"

    def test_unsupported_format_message(self) -> None:
        """The unsupported format message names the format key."""
        error = ParseError.unsupported_format("sql")

        assert error.code == ErrorCode.PARSE_UNSUPPORTED_FORMAT
        assert error.message == "Unsupported format: sql"

    def test_render_failed(self) -> None:
        """Render failures carry the reason."""
        error = RenderError.failed("boom")

        assert error.code == ErrorCode.RENDER_FAILED
        assert "boom" in error.message

    def test_patch_target_not_found(self) -> None:
        """Missing targets name the entity kind and name."""
        error = PatchError.target_not_found("note", "todo")

        assert error.code == ErrorCode.PATCH_TARGET_NOT_FOUND
        assert error.details == {"kind": "note", "name": "todo"}
        assert not error.retryable

    def test_patch_not_writable_is_retryable(self) -> None:
        """A read-only document may become writable later."""
        error = PatchError.not_writable()

        assert error.code == ErrorCode.PATCH_NOT_WRITABLE
        assert error.retryable

    def test_internal_unexpected(self) -> None:
        """Internal errors keep extra details."""
        error = InternalError.unexpected("oops", where="router")

        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.details == {"where": "router"}
