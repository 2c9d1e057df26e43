# Area: Store
"""
roping_engine._store.repo_ropers — Ropers Repository
====================================================

Repository for the roper table. Field changes go through one fixed
statement per field instead of a dynamically assembled UPDATE.
"""

from typing import Any, Dict, List, Optional

from .database import BaseRepository, NOW_SQL
from ..enums import RoperStatus

# One named statement per updatable field
ROPER_FIELD_UPDATES = {
    "first_name": f"UPDATE roper SET first_name = ?, updated_at = {NOW_SQL} WHERE id = ?",
    "last_name": f"UPDATE roper SET last_name = ?, updated_at = {NOW_SQL} WHERE id = ?",
    "specialty": f"UPDATE roper SET specialty = ?, updated_at = {NOW_SQL} WHERE id = ?",
    "rating": f"UPDATE roper SET rating = ?, updated_at = {NOW_SQL} WHERE id = ?",
    "phone": f"UPDATE roper SET phone = ?, updated_at = {NOW_SQL} WHERE id = ?",
    "email": f"UPDATE roper SET email = ?, updated_at = {NOW_SQL} WHERE id = ?",
    "level": f"UPDATE roper SET level = ?, updated_at = {NOW_SQL} WHERE id = ?",
}


class RoperRepository(BaseRepository):
    """Repository for roper table."""

    def create_roper(
        self,
        first_name: str,
        last_name: str,
        specialty: str,
        rating: int,
        level: str,
        phone: Optional[str] = None,
        email: Optional[str] = None,
    ) -> int:
        """Save a new roper and return its id."""
        query = """
            INSERT INTO roper
            (first_name, last_name, specialty, rating, phone, email, level)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """
        cursor = self._execute_write(
            query, (first_name, last_name, specialty, rating, phone, email, level)
        )
        return cursor.lastrowid

    def get_roper(self, roper_id: int) -> Optional[Dict[str, Any]]:
        """Get a roper by ID, whatever its status."""
        query = "SELECT * FROM roper WHERE id = ?"
        return self._execute_one(query, (roper_id,))

    def list_active_ropers(self) -> List[Dict[str, Any]]:
        """Get active ropers ordered by last then first name."""
        query = """
            SELECT * FROM roper
            WHERE status = ?
            ORDER BY last_name, first_name
        """
        return self._execute(query, (RoperStatus.ACTIVE.value,), fetch=True) or []

    def apply_changes(self, roper_id: int, changes: Dict[str, Any]) -> None:
        """
        Write the given field values atomically.

        Args:
            roper_id: Roper identifier
            changes: Mapping of field name to new (already validated) value
        """
        with self.transaction() as conn:
            for name, value in changes.items():
                self._execute_write(ROPER_FIELD_UPDATES[name], (value, roper_id), conn=conn)

    def deactivate(self, roper_id: int) -> int:
        """Soft-delete a roper. Returns rows affected."""
        query = f"UPDATE roper SET status = ?, updated_at = {NOW_SQL} WHERE id = ?"
        return self._execute_write(query, (RoperStatus.INACTIVE.value, roper_id)).rowcount
