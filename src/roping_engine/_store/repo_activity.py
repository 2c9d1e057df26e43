# Area: Store
"""
roping_engine._store.repo_activity — Activity Log Repository
============================================================

Repository for the activity_log table. Records are a side channel:
callers write them after the primary operation has committed.
"""

from typing import Any, Dict, List, Optional

from .database import BaseRepository


class ActivityRepository(BaseRepository):
    """Repository for activity_log table."""

    def record(
        self,
        action: str,
        entity_type: str,
        entity_id: Optional[int] = None,
        metadata: Optional[str] = None,
    ) -> None:
        """Append one activity record."""
        query = """
            INSERT INTO activity_log (action, entity_type, entity_id, metadata)
            VALUES (?, ?, ?, ?)
        """
        self._execute(query, (action, entity_type, entity_id, metadata))

    def get_recent(self, limit: int = 20, offset: int = 0) -> List[Dict[str, Any]]:
        """Get the most recent records, newest first."""
        query = """
            SELECT * FROM activity_log
            ORDER BY id DESC
            LIMIT ? OFFSET ?
        """
        return self._execute(query, (limit, offset), fetch=True) or []
