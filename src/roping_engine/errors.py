# Area: Core
"""
roping_engine.errors — Custom exception classes
================================================

Defines the exception hierarchy surfaced by the engine.
Each exception stores its context so callers can tell the kind
and the cause apart, and so the CLI can print a structured block.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import json


class RopingError(Exception):
    """Base exception for all roping_engine errors."""

    error_type = "ROPING_ERROR"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.error_type,
            message=self.message,
            context=self.context,
            details=None,
        )


class NotFoundError(RopingError):
    """Raised when a referenced event, team, roper or rule does not exist."""

    error_type = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity} {entity_id} not found",
            {"entity": entity, "entity_id": entity_id},
        )


class ValidationError(RopingError):
    """Raised when input values are out of range or not recognised."""

    error_type = "VALIDATION_FAILURE"

    def __init__(self, field: str, reason: str, errors: Optional[List[str]] = None):
        self.field = field
        self.reason = reason
        self.errors = errors or []
        super().__init__(
            f"Invalid {field}: {reason}",
            {"field": field, "reason": reason},
        )

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.error_type,
            message=self.message,
            context=self.context,
            details=self.errors,
        )


class StateError(RopingError):
    """Raised when an operation is refused because of the current state."""

    error_type = "INVALID_STATE"

    def __init__(self, reason: str, **context: Any):
        self.reason = reason
        super().__init__(reason, dict(context))


class EmptyInputError(RopingError):
    """Raised when a draw is requested and no team is eligible."""

    error_type = "EMPTY_INPUT"

    def __init__(self, event_id: int):
        self.event_id = event_id
        super().__init__(
            f"No eligible teams to draw for event {event_id}",
            {"event_id": event_id},
        )


class ConflictError(RopingError):
    """Raised when a uniqueness constraint would be violated."""

    error_type = "CONFLICT"

    def __init__(self, entity: str, reason: str, **context: Any):
        self.entity = entity
        self.reason = reason
        super().__init__(f"{entity}: {reason}", {"entity": entity, **context})


def _format_error_block(
    error_type: str,
    message: str,
    context: Dict[str, Any],
    details: Optional[List[str]],
) -> str:
    """Format a structured error block for terminal output."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " OPERATION FAILED",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Message:      {message}",
    ]

    if context:
        lines.append("")
        lines.append(" ── CONTEXT " + "─" * 52)
        lines.append(_indent_json(context))

    if details:
        lines.append("")
        lines.append(" ── VALIDATION ERRORS " + "─" * 42)
        for detail in details:
            lines.append(f" • {detail}")

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
