# Area: Store
"""
roping_engine._store.repo_payoffs — Payoff Rules Repository
===========================================================

Repository for payoff_rule table. A rule row is unique per
(event, position); deleting a rule marks it inactive and recreating
it at the same position reactivates the same row.
"""

from typing import Any, Dict, List, Optional

from .database import BaseRepository, NOW_SQL
from ..enums import RuleStatus
from ..types import PayoffRule


def _to_rule(row: Dict[str, Any]) -> PayoffRule:
    return PayoffRule(
        id=row["id"],
        event_id=row["event_id"],
        position=row["position"],
        percentage=row["percentage"],
        status=RuleStatus(row["status"]),
    )


class PayoffRuleRepository(BaseRepository):
    """Repository for payoff_rule table."""

    def find_by_position(self, event_id: int, position: int) -> Optional[Dict[str, Any]]:
        """Get the rule row at a position, active or not."""
        query = "SELECT * FROM payoff_rule WHERE event_id = ? AND position = ?"
        return self._execute_one(query, (event_id, position))

    def create_rule(self, event_id: int, position: int, percentage: float) -> int:
        query = """
            INSERT INTO payoff_rule (event_id, position, percentage, status)
            VALUES (?, ?, ?, 'active')
        """
        return self._execute_write(query, (event_id, position, percentage)).lastrowid

    def reactivate(self, rule_id: int, percentage: float) -> None:
        """Overwrite the percentage and mark the rule active."""
        query = f"""
            UPDATE payoff_rule
            SET percentage = ?, status = 'active', updated_at = {NOW_SQL}
            WHERE id = ?
        """
        self._execute_write(query, (percentage, rule_id))

    def list_active(self, event_id: int) -> List[PayoffRule]:
        """Get active rules of an event ordered by position."""
        query = """
            SELECT * FROM payoff_rule
            WHERE event_id = ? AND status = 'active'
            ORDER BY position ASC
        """
        rows = self._execute(query, (event_id,), fetch=True) or []
        return [_to_rule(r) for r in rows]

    def deactivate(self, rule_id: int) -> int:
        """Soft-delete a rule. Returns rows affected."""
        query = f"""
            UPDATE payoff_rule SET status = 'inactive', updated_at = {NOW_SQL}
            WHERE id = ? AND status = 'active'
        """
        return self._execute_write(query, (rule_id,)).rowcount
