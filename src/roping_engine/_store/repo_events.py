# Area: Store
"""
roping_engine._store.repo_events — Events Repository
====================================================

Repository for the event table: creation, lookup, status lifecycle
and the financial fields consumed by the payout calculator.
"""

import sqlite3
from typing import Any, Dict, Optional

from .database import BaseRepository, NOW_SQL


class EventRepository(BaseRepository):
    """
    Repository for event table.

    Handles saving, retrieving, and updating event records.
    """

    def create_event(
        self,
        name: str,
        date: str,
        rounds: int,
        status: str,
        location: Optional[str] = None,
        entry_fee: Optional[float] = None,
        prize_pool: Optional[float] = None,
    ) -> int:
        """
        Save a new event record.

        Returns:
            The new event id
        """
        query = """
            INSERT INTO event
            (name, date, rounds, status, location, entry_fee, prize_pool)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """
        cursor = self._execute_write(
            query, (name, date, rounds, status, location, entry_fee, prize_pool)
        )
        return cursor.lastrowid

    def get_event(
        self, event_id: int, conn: Optional[sqlite3.Connection] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Get an event by ID.

        Args:
            event_id: Event identifier to look up
            conn: Connection of an enclosing transaction, if any

        Returns:
            Event record dict or None if not found
        """
        query = "SELECT * FROM event WHERE id = ?"
        return self._execute_one(query, (event_id,), conn=conn)

    def update_status(self, event_id: int, status: str) -> int:
        """
        Update an event's status.

        Returns:
            Number of rows affected (0 when the event does not exist)
        """
        query = f"UPDATE event SET status = ?, updated_at = {NOW_SQL} WHERE id = ?"
        return self._execute_write(query, (status, event_id)).rowcount

    def get_financials(self, event_id: int) -> Optional[Dict[str, Any]]:
        """Get entry_fee and prize_pool for an event."""
        query = "SELECT entry_fee, prize_pool FROM event WHERE id = ?"
        return self._execute_one(query, (event_id,))
