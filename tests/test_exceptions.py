"""Tests for Hunch exception hierarchy."""

import pytest

from hunch.exceptions import (
    ConfigurationError,
    HunchError,
    InvariantViolationError,
    NotFoundError,
    ValidationError,
)


class TestHunchError:
    """Tests for the base HunchError class."""

    def test_error_message(self):
        error = HunchError("Something went wrong")
        assert error.message == "Something went wrong"
        assert str(error) == "Something went wrong"

    def test_error_code(self):
        assert HunchError("test").code == "hunch_error"

    def test_to_dict(self):
        """Should convert to API-friendly dict."""
        assert HunchError("Something went wrong").to_dict() == {
            "error": {"code": "hunch_error", "message": "Something went wrong"}
        }


class TestValidationError:
    def test_field_in_message(self):
        error = ValidationError("symptom", "must not be blank")
        assert error.field == "symptom"
        assert error.message == "symptom: must not be blank"
        assert error.code == "validation_error"

    def test_to_dict_includes_field(self):
        result = ValidationError("symptom", "must not be blank").to_dict()
        assert result["error"]["field"] == "symptom"
        assert result["error"]["code"] == "validation_error"


class TestNotFoundError:
    def test_attributes(self):
        error = NotFoundError("memory_record", "mem_123")
        assert error.resource_type == "memory_record"
        assert error.resource_id == "mem_123"
        assert error.message == "memory_record not found: mem_123"

    def test_to_dict(self):
        assert NotFoundError("memory_record", "mem_123").to_dict() == {
            "error": {
                "code": "not_found",
                "resource_type": "memory_record",
                "resource_id": "mem_123",
                "message": "memory_record not found: mem_123",
            }
        }


class TestInvariantViolationError:
    def test_attributes(self):
        error = InvariantViolationError("mem_1", "confidence 1.5 outside [0, 1]")
        assert error.record_id == "mem_1"
        assert error.code == "invariant_violation"
        assert "mem_1" in error.message


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            ValidationError("f", "m"),
            NotFoundError("memory_record", "x"),
            InvariantViolationError("x", "m"),
            ConfigurationError("missing"),
        ],
    )
    def test_all_are_hunch_errors(self, error):
        assert isinstance(error, HunchError)
        with pytest.raises(HunchError):
            raise error

    def test_configuration_error_code(self):
        assert ConfigurationError("missing").code == "configuration_error"
