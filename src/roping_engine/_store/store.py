# Area: Store
"""
roping_engine._store.store — Tournament Store
=============================================

The narrow persistence interface consumed by the engine. Composes the
table repositories and groups multi-row writes into transactions.
Nothing is cached: every call re-reads the rows it needs.
"""

import logging
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Set

from .database import DEFAULT_DB_PATH
from .repo_activity import ActivityRepository
from .repo_draws import DrawRepository
from .repo_events import EventRepository
from .repo_payoffs import PayoffRuleRepository
from .repo_ropers import RoperRepository
from .repo_runs import RunRepository
from .repo_teams import TeamRepository
from ..enums import RunStatus
from ..errors import NotFoundError
from ..types import DrawEntry, EventFinancials, PayoffRule, RunRecord, RunResult, TeamRef

logger = logging.getLogger("roping_engine.store")


class TournamentStore:
    """
    SQLite-backed store for events, teams, draws, runs and payoff rules.

    Attributes:
        db_path: Path to the SQLite database file
        events, ropers, teams, runs, draws, payoffs, activity: table repositories
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path
        self.events = EventRepository(db_path)
        self.ropers = RoperRepository(db_path)
        self.teams = TeamRepository(db_path)
        self.runs = RunRepository(db_path)
        self.draws = DrawRepository(db_path)
        self.payoffs = PayoffRuleRepository(db_path)
        self.activity = ActivityRepository(db_path)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Open an atomic scope shared by every repository."""
        with self.runs.transaction() as conn:
            yield conn

    @contextmanager
    def _scope(self, conn: Optional[sqlite3.Connection]) -> Iterator[sqlite3.Connection]:
        if conn is not None:
            yield conn
        else:
            with self.transaction() as own:
                yield own

    # ── Lookups ────────────────────────────────────────────────

    def get_event(self, event_id: int) -> Optional[Dict[str, Any]]:
        return self.events.get_event(event_id)

    def require_event(self, event_id: int) -> Dict[str, Any]:
        """Get an event or raise NotFoundError."""
        event = self.events.get_event(event_id)
        if event is None:
            raise NotFoundError("event", event_id)
        return event

    def get_team(self, team_id: int) -> Optional[Dict[str, Any]]:
        return self.teams.get_team(team_id)

    # ── Draw inputs ────────────────────────────────────────────

    def load_active_teams(self, event_id: int) -> List[TeamRef]:
        return self.teams.load_active_team_refs(event_id)

    def load_eliminated_team_ids(self, event_id: int) -> Set[int]:
        return self.runs.load_eliminated_team_ids(event_id)

    def team_has_elimination(self, event_id: int, team_id: int) -> bool:
        return self.runs.team_has_elimination(event_id, team_id)

    def round_has_completed_runs(self, event_id: int, round_number: int) -> bool:
        return self.runs.round_has_completed_runs(event_id, round_number)

    # ── Draw writes ────────────────────────────────────────────

    def replace_round(
        self,
        event_id: int,
        round_number: int,
        entries: Sequence[DrawEntry],
        seed_runs: bool = True,
        conn: Optional[sqlite3.Connection] = None,
    ) -> None:
        """
        Delete then insert the draw (and optionally pending runs) of a round.

        Args:
            event_id: Event identifier
            round_number: Round to replace
            entries: New draw entries, positions 1..N
            seed_runs: Also insert one pending run per entry
            conn: Enclosing transaction; a new one is opened when omitted
        """
        with self._scope(conn) as tx:
            removed_runs = self.runs.delete_round(tx, event_id, round_number)
            removed_draw = self.draws.delete_round(tx, event_id, round_number)
            for entry in entries:
                self.draws.insert_entry(tx, event_id, round_number, entry.position, entry.team_id)
                if seed_runs:
                    self.runs.insert_pending(tx, event_id, entry.team_id, round_number, entry.position)
        logger.debug(
            "Replaced round %d of event %d (removed %d draw, %d run rows)",
            round_number, event_id, removed_draw, removed_runs,
        )

    def upsert_round(
        self,
        event_id: int,
        round_number: int,
        entries: Sequence[DrawEntry],
        conn: Optional[sqlite3.Connection] = None,
    ) -> None:
        """
        Insert-or-update the draw and pending runs of a round.

        Captured runs keep their results. Draw rows beyond the new last
        position, left by an earlier and larger draw, are removed.
        """
        with self._scope(conn) as tx:
            for entry in entries:
                self.draws.upsert_entry(tx, event_id, round_number, entry.position, entry.team_id)
                self.runs.upsert_pending(tx, event_id, entry.team_id, round_number, entry.position)
            trimmed = self.draws.trim_round(tx, event_id, round_number, len(entries))
        if trimmed:
            logger.debug(
                "Trimmed %d stale draw rows from round %d of event %d",
                trimmed, round_number, event_id,
            )

    # ── Run writes ─────────────────────────────────────────────

    def get_run_status(
        self, conn: sqlite3.Connection, event_id: int, round_number: int, team_id: int
    ) -> Optional[RunStatus]:
        return self.runs.get_status(conn, event_id, round_number, team_id)

    def upsert_run(
        self,
        conn: sqlite3.Connection,
        result: RunResult,
        status: RunStatus = RunStatus.COMPLETED,
    ) -> int:
        """Insert or overwrite a captured result. Returns the run id."""
        return self.runs.upsert_result(
            conn,
            event_id=result.event_id,
            team_id=result.team_id,
            round_number=result.round,
            position=result.position,
            time_sec=result.time_sec,
            penalty=result.penalty,
            total_sec=result.total_sec,
            no_time=result.no_time,
            dq=result.dq,
            status=status,
        )

    def cascade_run_status(
        self,
        conn: sqlite3.Connection,
        event_id: int,
        team_id: int,
        after_round: int,
        new_status: RunStatus,
        only_from: Optional[RunStatus] = None,
    ) -> int:
        return self.runs.cascade_status(
            conn, event_id, team_id, after_round, new_status, only_from=only_from
        )

    # ── Aggregation inputs ─────────────────────────────────────

    def load_runs(self, event_id: int, round_number: Optional[int] = None) -> List[RunRecord]:
        return self.runs.load_runs(event_id, round_number)

    def load_payoff_rules(self, event_id: int) -> List[PayoffRule]:
        return self.payoffs.list_active(event_id)

    def load_event_financials(self, event_id: int) -> EventFinancials:
        """
        Get an event's pot inputs, defaulting absent values to 0.

        Raises:
            NotFoundError: If the event does not exist
        """
        row = self.events.get_financials(event_id)
        if row is None:
            raise NotFoundError("event", event_id)
        return EventFinancials(
            entry_fee=row["entry_fee"] or 0.0,
            prize_pool=row["prize_pool"] or 0.0,
        )

    def count_active_teams(self, event_id: int) -> int:
        return self.teams.count_active_teams(event_id)
