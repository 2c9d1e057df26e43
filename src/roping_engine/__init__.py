"""
roping_engine — Team-Roping Tournament Engine
=============================================

Draw generation, run-state tracking and settlement for team-roping
jackpots, backed by a local SQLite database.

Quick Start:
    from roping_engine import TournamentService
    from roping_engine._store import init_database

    init_database("roping.db")
    service = TournamentService("roping.db")
    service.generate_round_draw(event_id=1, round_number=1)
    service.record_run({"event_id": 1, "team_id": 2, "round": 1,
                        "position": 1, "time_sec": 6.8, "penalty": 5})
    service.get_standings(1)
    service.get_payout_breakdown(1)

Type Definitions
----------------
Payloads and result records are available for import:

    from roping_engine import (
        NewEvent, NewRoper, NewTeam, RunResult, NewPayoffRule,
        Standing, PayoutBreakdown,
    )
"""

from .service import TournamentService
from .enums import EventStatus, RunStatus, TeamStatus, Specialty, Level
from .errors import (
    RopingError,
    NotFoundError,
    ValidationError,
    StateError,
    EmptyInputError,
    ConflictError,
)
from .types import (
    # Payloads
    NewEvent,
    NewRoper,
    RoperChanges,
    NewTeam,
    TeamChanges,
    RunResult,
    NewPayoffRule,
    # Records
    RunRecord,
    PayoffRule,
    Standing,
    PayoutAllocation,
    PayoutBreakdown,
)

__all__ = [
    # Main class
    "TournamentService",
    # States
    "EventStatus",
    "RunStatus",
    "TeamStatus",
    "Specialty",
    "Level",
    # Errors
    "RopingError",
    "NotFoundError",
    "ValidationError",
    "StateError",
    "EmptyInputError",
    "ConflictError",
    # Payloads
    "NewEvent",
    "NewRoper",
    "RoperChanges",
    "NewTeam",
    "TeamChanges",
    "RunResult",
    "NewPayoffRule",
    # Records
    "RunRecord",
    "PayoffRule",
    "Standing",
    "PayoutAllocation",
    "PayoutBreakdown",
]
__version__ = "1.0.0"
