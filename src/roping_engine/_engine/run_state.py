# Area: Engine
"""
roping_engine._engine.run_state — Run State Tracker
===================================================

Owns the lifecycle of one team's result within a round and the effect
of an elimination (NT or DQ) on that team's later rounds.
"""

import logging
from typing import Any, Mapping, Set, Union

from ..enums import RunEvent, RunStatus
from ..errors import NotFoundError
from ..types import RunResult, parse_payload
from .._store.store import TournamentStore

logger = logging.getLogger("roping_engine.run_state")


# Valid run transitions: {current_status: {event: next_status}}
TRANSITIONS = {
    RunStatus.PENDING: {
        RunEvent.RESULT_CAPTURED: RunStatus.COMPLETED,
        RunEvent.ELIMINATED_EARLIER: RunStatus.SKIPPED,
    },
    RunStatus.COMPLETED: {
        RunEvent.RESULT_CAPTURED: RunStatus.COMPLETED,
        RunEvent.ELIMINATED_EARLIER: RunStatus.SKIPPED,
    },
    RunStatus.SKIPPED: {
        RunEvent.RESULT_CAPTURED: RunStatus.COMPLETED,
        RunEvent.ELIMINATED_EARLIER: RunStatus.SKIPPED,
        RunEvent.ELIMINATION_CORRECTED: RunStatus.PENDING,
    },
}


def next_status(current: RunStatus, event: RunEvent) -> RunStatus:
    """
    Get the status a run moves to on an event.

    Raises:
        ValueError: If the event is not valid from the current status
    """
    valid = TRANSITIONS.get(current, {})
    if event not in valid:
        raise ValueError(f"Invalid run transition: {event.value} from {current.value}")
    return valid[event]


class RunStateTracker:
    """
    Records captured results and cascades eliminations.

    Attributes:
        store: Persistence collaborator
    """

    def __init__(self, store: TournamentStore):
        self.store = store

    def record_result(self, payload: Union[RunResult, Mapping[str, Any]]) -> int:
        """
        Record a captured result and update the team's later rounds.

        An NT or DQ moves every later round of the team to skipped. A
        valid time moves later rounds that are currently skipped back to
        pending; completed rounds are left alone. The upsert and the
        cascade commit together.

        Args:
            payload: RunResult or mapping of its fields

        Returns:
            Id of the run row written

        Raises:
            ValidationError: If the payload is malformed
            NotFoundError: If the event, or the team within it, does not exist
        """
        result = parse_payload(RunResult, payload)
        self.store.require_event(result.event_id)
        team = self.store.get_team(result.team_id)
        if team is None or team["event_id"] != result.event_id:
            raise NotFoundError("team", result.team_id)

        with self.store.transaction() as conn:
            current = self.store.get_run_status(
                conn, result.event_id, result.round, result.team_id
            ) or RunStatus.PENDING
            status = next_status(current, RunEvent.RESULT_CAPTURED)
            run_id = self.store.upsert_run(conn, result, status)

            if result.is_elimination:
                # Every later round goes to skipped, captured or not
                later = next_status(RunStatus.PENDING, RunEvent.ELIMINATED_EARLIER)
                changed = self.store.cascade_run_status(
                    conn, result.event_id, result.team_id,
                    after_round=result.round, new_status=later,
                )
            else:
                # Only rounds skipped by an earlier elimination come back
                later = next_status(RunStatus.SKIPPED, RunEvent.ELIMINATION_CORRECTED)
                changed = self.store.cascade_run_status(
                    conn, result.event_id, result.team_id,
                    after_round=result.round, new_status=later,
                    only_from=RunStatus.SKIPPED,
                )

        logger.info(
            "Recorded run %d: event=%d team=%d round=%d total=%s nt=%s dq=%s (%d later rounds -> %s)",
            run_id, result.event_id, result.team_id, result.round,
            result.total_sec, result.no_time, result.dq,
            changed, later.value,
            extra={"event_id": result.event_id, "team_id": result.team_id, "round": result.round},
        )
        return run_id

    def is_eliminated(self, event_id: int, team_id: int) -> bool:
        """A team is out for the rest of the event once any run is NT or DQ."""
        return self.store.team_has_elimination(event_id, team_id)

    def eliminated_team_ids(self, event_id: int) -> Set[int]:
        return self.store.load_eliminated_team_ids(event_id)
