# Area: Store
"""
roping_engine._store.repo_draws — Draw Repository
=================================================

Repository for the draw table: the run order (position) of each team
within a round, unique per (event, round, position).
"""

import sqlite3
from typing import Any, Dict, List

from .database import BaseRepository, NOW_SQL


class DrawRepository(BaseRepository):
    """Repository for draw table."""

    def insert_entry(
        self, conn: sqlite3.Connection, event_id: int, round_number: int,
        position: int, team_id: int,
    ) -> None:
        query = """
            INSERT INTO draw (event_id, round, position, team_id)
            VALUES (?, ?, ?, ?)
        """
        self._execute_write(query, (event_id, round_number, position, team_id), conn=conn)

    def upsert_entry(
        self, conn: sqlite3.Connection, event_id: int, round_number: int,
        position: int, team_id: int,
    ) -> None:
        query = f"""
            INSERT INTO draw (event_id, round, position, team_id)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(event_id, round, position) DO UPDATE SET
              team_id    = excluded.team_id,
              updated_at = {NOW_SQL}
        """
        self._execute_write(query, (event_id, round_number, position, team_id), conn=conn)

    def delete_round(
        self, conn: sqlite3.Connection, event_id: int, round_number: int
    ) -> int:
        """Delete the draw of one round. Returns rows deleted."""
        query = "DELETE FROM draw WHERE event_id = ? AND round = ?"
        return self._execute_write(query, (event_id, round_number), conn=conn).rowcount

    def get_draw(self, event_id: int, round_number: int) -> List[Dict[str, Any]]:
        """
        Get the draw of one round with each team's ropers.

        Returns:
            Draw rows ordered by position
        """
        query = """
            SELECT
              d.id, d.event_id, d.round, d.position, d.team_id,
              t.header_id, t.heeler_id
            FROM draw d
            JOIN team t ON t.id = d.team_id
            WHERE d.event_id = ? AND d.round = ?
            ORDER BY d.position ASC
        """
        return self._execute(query, (event_id, round_number), fetch=True) or []

    def trim_round(
        self, conn: sqlite3.Connection, event_id: int, round_number: int, keep: int
    ) -> int:
        """Delete draw rows of a round placed after position ``keep``. Returns rows deleted."""
        query = "DELETE FROM draw WHERE event_id = ? AND round = ? AND position > ?"
        return self._execute_write(query, (event_id, round_number, keep), conn=conn).rowcount
