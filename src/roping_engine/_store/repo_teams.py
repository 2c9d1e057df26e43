# Area: Store
"""
roping_engine._store.repo_teams — Teams Repository
==================================================

Repository for the team table. Teams belong to exactly one event and
pair a header with a heeler.
"""

import sqlite3
from typing import Any, Dict, List, Optional

from .database import BaseRepository, NOW_SQL
from ..errors import ConflictError
from ..types import TeamRef


class TeamRepository(BaseRepository):
    """
    Repository for team table.

    Handles saving, retrieving, and updating team records.
    """

    def create_team(
        self, event_id: int, header_id: int, heeler_id: int, rating: float
    ) -> int:
        """
        Save a new active team.

        Returns:
            The new team id

        Raises:
            ConflictError: If the (event, header, heeler) pairing exists
        """
        query = """
            INSERT INTO team (event_id, header_id, heeler_id, rating, status)
            VALUES (?, ?, ?, ?, 'active')
        """
        try:
            cursor = self._execute_write(query, (event_id, header_id, heeler_id, rating))
        except sqlite3.IntegrityError as e:
            if "UNIQUE" in str(e):
                raise ConflictError(
                    "team",
                    "a team with this header/heeler already exists in the event",
                    event_id=event_id,
                    header_id=header_id,
                    heeler_id=heeler_id,
                ) from e
            raise
        return cursor.lastrowid

    def get_team(
        self, team_id: int, conn: Optional[sqlite3.Connection] = None
    ) -> Optional[Dict[str, Any]]:
        """Get a team by ID, whatever its status."""
        query = "SELECT * FROM team WHERE id = ?"
        return self._execute_one(query, (team_id,), conn=conn)

    def list_active_teams(self, event_id: int) -> List[Dict[str, Any]]:
        """Get active teams of an event ordered by id."""
        query = """
            SELECT * FROM team
            WHERE event_id = ? AND status = 'active'
            ORDER BY id ASC
        """
        return self._execute(query, (event_id,), fetch=True) or []

    def load_active_team_refs(self, event_id: int) -> List[TeamRef]:
        """Get (id, header, heeler) of active teams ordered by id."""
        query = """
            SELECT id, header_id, heeler_id FROM team
            WHERE event_id = ? AND status = 'active'
            ORDER BY id ASC
        """
        rows = self._execute(query, (event_id,), fetch=True) or []
        return [TeamRef(r["id"], r["header_id"], r["heeler_id"]) for r in rows]

    def count_active_teams(self, event_id: int) -> int:
        """Count active teams of an event."""
        query = "SELECT COUNT(*) AS n FROM team WHERE event_id = ? AND status = 'active'"
        row = self._execute_one(query, (event_id,))
        return int(row["n"]) if row else 0

    def update_rating(
        self, team_id: int, rating: float, conn: Optional[sqlite3.Connection] = None
    ) -> None:
        query = f"UPDATE team SET rating = ?, updated_at = {NOW_SQL} WHERE id = ?"
        self._execute_write(query, (rating, team_id), conn=conn)

    def update_status(
        self, team_id: int, status: str, conn: Optional[sqlite3.Connection] = None
    ) -> int:
        query = f"UPDATE team SET status = ?, updated_at = {NOW_SQL} WHERE id = ?"
        return self._execute_write(query, (status, team_id), conn=conn).rowcount
