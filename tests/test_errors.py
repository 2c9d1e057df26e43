# Area: Core Tests
"""Tests for the error hierarchy."""

import pytest

from roping_engine.errors import (
    ConflictError,
    EmptyInputError,
    NotFoundError,
    RopingError,
    StateError,
    ValidationError,
)


class TestErrorHierarchy:
    """Every error is a RopingError with its own error_type."""

    @pytest.mark.parametrize("error", [
        NotFoundError("event", 1),
        ValidationError("round", "must be positive"),
        StateError("locked", event_id=1),
        EmptyInputError(1),
        ConflictError("team", "exists"),
    ])
    def test_is_roping_error(self, error):
        assert isinstance(error, RopingError)

    def test_error_types_are_distinct(self):
        types = {
            NotFoundError.error_type,
            ValidationError.error_type,
            StateError.error_type,
            EmptyInputError.error_type,
            ConflictError.error_type,
        }
        assert len(types) == 5


class TestNotFoundError:
    def test_message_and_context(self):
        """Test entity and id are kept."""
        error = NotFoundError("team", 42)
        assert error.entity == "team"
        assert error.entity_id == 42
        assert str(error) == "team 42 not found"
        assert error.context == {"entity": "team", "entity_id": 42}


class TestValidationError:
    def test_field_and_reason(self):
        error = ValidationError("percentage", "must be <= 1")
        assert error.field == "percentage"
        assert "percentage" in error.message
        assert error.errors == []

    def test_format_lists_details(self):
        """Test validation details appear in the error block."""
        error = ValidationError("round", "bad", ["round: must be >= 1", "position: missing"])
        block = error.format_error_log()
        assert "VALIDATION ERRORS" in block
        assert "• round: must be >= 1" in block
        assert "• position: missing" in block


class TestStateError:
    def test_context_from_kwargs(self):
        error = StateError("Event 3 is locked", event_id=3, status="locked")
        assert error.reason == "Event 3 is locked"
        assert error.context == {"event_id": 3, "status": "locked"}


class TestFormatErrorLog:
    def test_block_contains_type_message_and_context(self):
        """Test the structured block layout."""
        block = EmptyInputError(7).format_error_log()
        assert "OPERATION FAILED" in block
        assert "Error Type:   EMPTY_INPUT" in block
        assert "No eligible teams to draw for event 7" in block
        assert '"event_id": 7' in block

    def test_block_without_context(self):
        block = RopingError("boom").format_error_log()
        assert "CONTEXT" not in block
        assert "Message:      boom" in block
