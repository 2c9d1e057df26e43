# Area: Store
"""
roping_engine._store.repo_runs — Runs Repository
================================================

Repository for the run table. A run is the result of one team in one
round of one event, unique per (event, round, team).
"""

import sqlite3
from typing import Any, Dict, List, Optional, Set

from .database import BaseRepository, NOW_SQL
from ..enums import RunStatus
from ..types import RunRecord

_RUN_SELECT = """
    SELECT
      r.id, r.event_id, r.team_id, r.round, r.position,
      r.time_sec, r.penalty, r.total_sec, r.no_time, r.dq, r.status,
      (rh.first_name || ' ' || rh.last_name)   AS header_name,
      (rhe.first_name || ' ' || rhe.last_name) AS heeler_name
    FROM run r
    JOIN team t    ON r.team_id = t.id
    JOIN roper rh  ON t.header_id = rh.id
    JOIN roper rhe ON t.heeler_id = rhe.id
"""


def _to_record(row: Dict[str, Any]) -> RunRecord:
    return RunRecord(
        id=row["id"],
        event_id=row["event_id"],
        team_id=row["team_id"],
        round=row["round"],
        position=row["position"],
        time_sec=row["time_sec"],
        penalty=row["penalty"],
        total_sec=row["total_sec"],
        no_time=bool(row["no_time"]),
        dq=bool(row["dq"]),
        status=RunStatus(row["status"]),
        header_name=row.get("header_name") or "",
        heeler_name=row.get("heeler_name") or "",
    )


class RunRepository(BaseRepository):
    """
    Repository for run table.

    Mutations that belong to a larger atomic operation take the
    transaction connection as ``conn``.
    """

    def get_status(
        self, conn: sqlite3.Connection, event_id: int, round_number: int, team_id: int
    ) -> Optional[RunStatus]:
        """Get the current status of one run, or None if it has no row."""
        row = self._execute_one(
            "SELECT status FROM run WHERE event_id = ? AND round = ? AND team_id = ?",
            (event_id, round_number, team_id),
            conn=conn,
        )
        return RunStatus(row["status"]) if row else None

    def upsert_result(
        self,
        conn: sqlite3.Connection,
        event_id: int,
        team_id: int,
        round_number: int,
        position: int,
        time_sec: Optional[float],
        penalty: float,
        total_sec: Optional[float],
        no_time: bool,
        dq: bool,
        status: RunStatus = RunStatus.COMPLETED,
    ) -> int:
        """
        Insert or overwrite a captured result.

        Returns:
            Id of the inserted or updated run row
        """
        query = f"""
            INSERT INTO run
            (event_id, team_id, round, position, time_sec, penalty, total_sec,
             no_time, dq, status)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(event_id, round, team_id) DO UPDATE SET
              position   = excluded.position,
              time_sec   = excluded.time_sec,
              penalty    = excluded.penalty,
              total_sec  = excluded.total_sec,
              no_time    = excluded.no_time,
              dq         = excluded.dq,
              status     = excluded.status,
              updated_at = {NOW_SQL}
        """
        self._execute_write(query, (
            event_id, team_id, round_number, position, time_sec, penalty,
            total_sec, int(no_time), int(dq), status.value,
        ), conn=conn)
        row = self._execute_one(
            "SELECT id FROM run WHERE event_id = ? AND round = ? AND team_id = ?",
            (event_id, round_number, team_id),
            conn=conn,
        )
        return row["id"]

    def cascade_status(
        self,
        conn: sqlite3.Connection,
        event_id: int,
        team_id: int,
        after_round: int,
        new_status: RunStatus,
        only_from: Optional[RunStatus] = None,
    ) -> int:
        """
        Set the status of a team's runs in rounds after ``after_round``.

        Args:
            conn: Transaction connection
            event_id: Event identifier
            team_id: Team identifier
            after_round: Only rounds strictly greater than this change
            new_status: Status to write
            only_from: If given, only rows currently in this status change

        Returns:
            Number of rows affected
        """
        query = f"""
            UPDATE run SET status = ?, updated_at = {NOW_SQL}
            WHERE event_id = ? AND team_id = ? AND round > ?
        """
        params: tuple = (new_status.value, event_id, team_id, after_round)
        if only_from is not None:
            query += " AND status = ?"
            params += (only_from.value,)
        return self._execute_write(query, params, conn=conn).rowcount

    def insert_pending(
        self, conn: sqlite3.Connection, event_id: int, team_id: int,
        round_number: int, position: int,
    ) -> None:
        """Seed a pending run with no time recorded."""
        query = """
            INSERT INTO run
            (event_id, team_id, round, position, time_sec, penalty, total_sec,
             no_time, dq, status)
            VALUES (?, ?, ?, ?, NULL, 0.0, NULL, 0, 0, 'pending')
        """
        self._execute_write(query, (event_id, team_id, round_number, position), conn=conn)

    def upsert_pending(
        self, conn: sqlite3.Connection, event_id: int, team_id: int,
        round_number: int, position: int,
    ) -> None:
        """Seed a pending run, or move an existing run to a new position."""
        query = f"""
            INSERT INTO run
            (event_id, team_id, round, position, time_sec, penalty, total_sec,
             no_time, dq, status)
            VALUES (?, ?, ?, ?, NULL, 0.0, NULL, 0, 0, 'pending')
            ON CONFLICT(event_id, round, team_id) DO UPDATE SET
              position   = excluded.position,
              updated_at = {NOW_SQL}
        """
        self._execute_write(query, (event_id, team_id, round_number, position), conn=conn)

    def delete_round(
        self, conn: sqlite3.Connection, event_id: int, round_number: int
    ) -> int:
        """Delete every run of one round. Returns rows deleted."""
        query = "DELETE FROM run WHERE event_id = ? AND round = ?"
        return self._execute_write(query, (event_id, round_number), conn=conn).rowcount

    def round_has_completed_runs(self, event_id: int, round_number: int) -> bool:
        """Check whether a round already has any captured result."""
        query = """
            SELECT EXISTS(
              SELECT 1 FROM run
              WHERE event_id = ? AND round = ? AND status = 'completed'
            ) AS started
        """
        row = self._execute_one(query, (event_id, round_number))
        return bool(row["started"])

    def load_eliminated_team_ids(self, event_id: int) -> Set[int]:
        """Get ids of teams with any NT or DQ run in the event."""
        query = """
            SELECT DISTINCT team_id FROM run
            WHERE event_id = ? AND (no_time = 1 OR dq = 1)
        """
        rows = self._execute(query, (event_id,), fetch=True) or []
        return {r["team_id"] for r in rows}

    def team_has_elimination(self, event_id: int, team_id: int) -> bool:
        query = """
            SELECT EXISTS(
              SELECT 1 FROM run
              WHERE event_id = ? AND team_id = ? AND (no_time = 1 OR dq = 1)
            ) AS eliminated
        """
        row = self._execute_one(query, (event_id, team_id))
        return bool(row["eliminated"])

    def load_runs(
        self, event_id: int, round_number: Optional[int] = None
    ) -> List[RunRecord]:
        """
        Get runs of an event with roper names, in run order.

        Args:
            event_id: Event identifier
            round_number: Restrict to one round when given

        Returns:
            Run records ordered by round, position, id
        """
        if round_number is None:
            query = _RUN_SELECT + " WHERE r.event_id = ? ORDER BY r.round, r.position, r.id"
            params: tuple = (event_id,)
        else:
            query = _RUN_SELECT + " WHERE r.event_id = ? AND r.round = ? ORDER BY r.position, r.id"
            params = (event_id, round_number)
        rows = self._execute(query, params, fetch=True) or []
        return [_to_record(r) for r in rows]

    def get_run(self, run_id: int) -> Optional[RunRecord]:
        row = self._execute_one(_RUN_SELECT + " WHERE r.id = ?", (run_id,))
        return _to_record(row) if row else None
