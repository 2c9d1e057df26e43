# Area: Core
"""
roping_engine.enums — Lifecycle states
======================================

Explicit lifecycle states for every persisted entity. Each value is
stored verbatim in the matching ``status`` / ``specialty`` / ``level``
text column.
"""

from enum import Enum
from typing import Dict, Type, TypeVar

from .errors import ValidationError

E = TypeVar("E", bound=Enum)


class EventStatus(Enum):
    """
    States of an event.

    UPCOMING -> ACTIVE -> LOCKED -> COMPLETED -> FINALIZED -> ARCHIVED

    LOCKED blocks roster changes and batch draws. COMPLETED, FINALIZED
    and ARCHIVED are terminal for single-round draw generation.
    """
    UPCOMING = "upcoming"
    ACTIVE = "active"
    LOCKED = "locked"
    COMPLETED = "completed"
    FINALIZED = "finalized"
    ARCHIVED = "archived"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_EVENT_STATUSES


TERMINAL_EVENT_STATUSES = frozenset({
    EventStatus.COMPLETED,
    EventStatus.FINALIZED,
    EventStatus.ARCHIVED,
})

# Values accepted from callers that map onto a canonical state
EVENT_STATUS_ALIASES: Dict[str, EventStatus] = {
    "draft": EventStatus.UPCOMING,
}


class RunStatus(Enum):
    """
    States of a single team's run within a round.

    PENDING -> COMPLETED (result captured)
    PENDING -> SKIPPED (team eliminated in an earlier round)
    SKIPPED -> PENDING (earlier elimination corrected to a valid time)
    """
    PENDING = "pending"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class RunEvent(Enum):
    """
    Events that move a run between states.

    - RESULT_CAPTURED: a time or NT/DQ was recorded for this run
    - ELIMINATED_EARLIER: the team got NT/DQ in an earlier round
    - ELIMINATION_CORRECTED: that earlier NT/DQ was replaced by a valid time
    """
    RESULT_CAPTURED = "RESULT_CAPTURED"
    ELIMINATED_EARLIER = "ELIMINATED_EARLIER"
    ELIMINATION_CORRECTED = "ELIMINATION_CORRECTED"


class TeamStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class RoperStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class RuleStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Specialty(Enum):
    HEADER = "header"
    HEELER = "heeler"
    BOTH = "both"


class Level(Enum):
    PRO = "pro"
    AMATEUR = "amateur"
    PRINCIPIANTE = "principiante"


def parse_enum(enum_cls: Type[E], value: str, field: str) -> E:
    """
    Parse a raw string into an enum member.

    Args:
        enum_cls: Target enum class
        value: Raw value (matched case-insensitively)
        field: Field name used in the error

    Returns:
        The matching enum member

    Raises:
        ValidationError: If the value is not recognised
    """
    if isinstance(value, enum_cls):
        return value
    raw = str(value).strip().lower()
    for member in enum_cls:
        if member.value == raw:
            return member
    allowed = ", ".join(m.value for m in enum_cls)
    raise ValidationError(field, f"'{value}' is not one of: {allowed}")


def parse_event_status(value: str) -> EventStatus:
    """Parse an event status, honouring legacy aliases."""
    if isinstance(value, EventStatus):
        return value
    raw = str(value).strip().lower()
    if raw in EVENT_STATUS_ALIASES:
        return EVENT_STATUS_ALIASES[raw]
    return parse_enum(EventStatus, raw, "status")
