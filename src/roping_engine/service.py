# Area: Core
"""
roping_engine.service — Tournament Service
==========================================

The operation surface of the package. Each call is a synchronous
request/response that runs to completion and either returns a result
or raises a RopingError.

Usage:
    service = TournamentService("roping.db")
    service.generate_round_draw(event_id=1, round_number=1)
    service.record_run({"event_id": 1, "team_id": 4, "round": 1,
                        "position": 1, "time_sec": 7.2})
    standings = service.get_standings(1)
"""

import logging
import random
import sqlite3
from typing import Any, Dict, List, Mapping, Optional, Union

from ._engine.draw import DrawGenerator
from ._engine.payout import compute_payout
from ._engine.run_state import RunStateTracker
from ._engine.standings import aggregate_standings
from ._store.database import DEFAULT_DB_PATH
from ._store.store import TournamentStore
from .enums import EventStatus, RuleStatus, TeamStatus, parse_event_status
from .errors import NotFoundError, StateError, ValidationError
from .types import (
    NewEvent,
    NewPayoffRule,
    NewRoper,
    NewTeam,
    PayoffRule,
    PayoutBreakdown,
    RoperChanges,
    RunRecord,
    RunResult,
    Standing,
    TeamChanges,
    parse_payload,
)

logger = logging.getLogger("roping_engine.service")

Payload = Union[Mapping[str, Any], Any]

# Roper fields that map to NOT NULL columns
_REQUIRED_ROPER_FIELDS = {"first_name", "last_name", "specialty", "rating", "level"}


class TournamentService:
    """
    Facade over the store and the engine components.

    Attributes:
        store: Persistence collaborator
        tracker: Run State Tracker
        draws: Draw Generator
    """

    def __init__(
        self,
        db_path: str = DEFAULT_DB_PATH,
        rng: Optional[random.Random] = None,
        store: Optional[TournamentStore] = None,
    ):
        self.store = store if store is not None else TournamentStore(db_path)
        self.tracker = RunStateTracker(self.store)
        self.draws = DrawGenerator(self.store, rng)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "TournamentService":
        """Build a service from a loaded config dict."""
        seed = config.get("draw_seed")
        rng = random.Random(seed) if seed is not None else None
        return cls(db_path=config["db_path"], rng=rng)

    # ── Activity (best effort) ─────────────────────────────────

    def _log_activity(
        self,
        action: str,
        entity_type: str,
        entity_id: Optional[int] = None,
        metadata: Optional[str] = None,
    ) -> None:
        """Write an activity record; a failure is reported, never raised."""
        try:
            self.store.activity.record(action, entity_type, entity_id, metadata)
        except sqlite3.Error as e:
            logger.error("Failed to write activity record for %s: %s", action, e)

    def recent_activity(self, limit: int = 20, offset: int = 0) -> List[Dict[str, Any]]:
        return self.store.activity.get_recent(limit, offset)

    # ── Events ─────────────────────────────────────────────────

    def create_event(self, payload: Payload) -> int:
        data = parse_payload(NewEvent, payload)
        status = parse_event_status(data.status)
        event_id = self.store.events.create_event(
            name=data.name,
            date=data.date,
            rounds=data.rounds,
            status=status.value,
            location=data.location,
            entry_fee=data.entry_fee,
            prize_pool=data.prize_pool,
        )
        self._log_activity("create_event", "event", event_id, data.name)
        return event_id

    def get_event(self, event_id: int) -> Dict[str, Any]:
        return self.store.require_event(event_id)

    def update_event_status(self, event_id: int, status: Union[str, EventStatus]) -> EventStatus:
        """
        Move an event to a new status.

        Raises:
            ValidationError: If the status is not recognised
            NotFoundError: If the event does not exist
        """
        new_status = parse_event_status(status)
        if self.store.events.update_status(event_id, new_status.value) == 0:
            raise NotFoundError("event", event_id)
        self._log_activity("update_event_status", "event", event_id, new_status.value)
        return new_status

    def lock_event(self, event_id: int) -> None:
        self.update_event_status(event_id, EventStatus.LOCKED)

    def _ensure_event_unlocked(self, event_id: int) -> None:
        event = self.store.require_event(event_id)
        if parse_event_status(event["status"]) is EventStatus.LOCKED:
            raise StateError(
                f"Event {event_id} is locked; no changes allowed",
                event_id=event_id, status=EventStatus.LOCKED.value,
            )

    # ── Ropers ─────────────────────────────────────────────────

    def create_roper(self, payload: Payload) -> int:
        data = parse_payload(NewRoper, payload)
        roper_id = self.store.ropers.create_roper(
            first_name=data.first_name,
            last_name=data.last_name,
            specialty=data.specialty.value,
            rating=data.rating,
            level=data.level.value,
            phone=data.phone,
            email=data.email,
        )
        self._log_activity("create_roper", "roper", roper_id, f"{data.first_name} {data.last_name}")
        return roper_id

    def list_ropers(self) -> List[Dict[str, Any]]:
        return self.store.ropers.list_active_ropers()

    def update_roper(self, roper_id: int, changes: Payload) -> None:
        """
        Change only the fields present in ``changes``.

        Raises:
            NotFoundError: If the roper does not exist
            ValidationError: If a value is invalid or a required field is cleared
        """
        data = parse_payload(RoperChanges, changes)
        if self.store.ropers.get_roper(roper_id) is None:
            raise NotFoundError("roper", roper_id)

        values: Dict[str, Any] = {}
        for name in sorted(data.changed_fields()):
            value = getattr(data, name)
            if value is None and name in _REQUIRED_ROPER_FIELDS:
                raise ValidationError(name, "cannot be cleared")
            values[name] = getattr(value, "value", value)
        if not values:
            return

        self.store.ropers.apply_changes(roper_id, values)
        self._log_activity("update_roper", "roper", roper_id, ",".join(values))

    def delete_roper(self, roper_id: int) -> None:
        if self.store.ropers.deactivate(roper_id) == 0:
            raise NotFoundError("roper", roper_id)
        self._log_activity("delete_roper", "roper", roper_id)

    # ── Teams ──────────────────────────────────────────────────

    def create_team(self, payload: Payload) -> int:
        """
        Register a header/heeler pairing in an event.

        Raises:
            ValidationError: If header and heeler are the same roper
            NotFoundError: If the event or either roper does not exist
            StateError: If the event is locked
            ConflictError: If the pairing already exists in the event
        """
        data = parse_payload(NewTeam, payload)
        if data.header_id == data.heeler_id:
            raise ValidationError("heeler_id", "header and heeler must be different ropers")
        self._ensure_event_unlocked(data.event_id)
        for roper_id in (data.header_id, data.heeler_id):
            if self.store.ropers.get_roper(roper_id) is None:
                raise NotFoundError("roper", roper_id)

        team_id = self.store.teams.create_team(
            data.event_id, data.header_id, data.heeler_id, data.rating
        )
        logger.info(
            "Created team %d in event %d (header=%d, heeler=%d)",
            team_id, data.event_id, data.header_id, data.heeler_id,
        )
        self._log_activity("create_team", "team", team_id, f"Event {data.event_id}")
        return team_id

    def list_teams(self, event_id: int) -> List[Dict[str, Any]]:
        return self.store.teams.list_active_teams(event_id)

    def _require_team(self, team_id: int) -> Dict[str, Any]:
        team = self.store.get_team(team_id)
        if team is None:
            raise NotFoundError("team", team_id)
        return team

    def update_team(self, team_id: int, changes: Payload) -> None:
        """Change a team's rating and/or status."""
        data = parse_payload(TeamChanges, changes)
        team = self._require_team(team_id)
        self._ensure_event_unlocked(team["event_id"])

        fields = data.changed_fields()
        if "rating" in fields and data.rating is None:
            raise ValidationError("rating", "cannot be cleared")
        if "status" in fields and data.status is None:
            raise ValidationError("status", "cannot be cleared")
        if not fields:
            return

        with self.store.transaction() as conn:
            if "rating" in fields:
                self.store.teams.update_rating(team_id, data.rating, conn=conn)
            if "status" in fields:
                self.store.teams.update_status(team_id, data.status.value, conn=conn)
        self._log_activity("update_team", "team", team_id, ",".join(sorted(fields)))

    def delete_team(self, team_id: int) -> None:
        """Soft-delete a team by marking it inactive."""
        team = self._require_team(team_id)
        self._ensure_event_unlocked(team["event_id"])
        self.store.teams.update_status(team_id, TeamStatus.INACTIVE.value)
        self._log_activity("delete_team", "team", team_id)

    # ── Draw ───────────────────────────────────────────────────

    def generate_round_draw(
        self,
        event_id: int,
        round_number: int,
        reseed: bool = True,
        seed_runs: bool = True,
    ) -> int:
        """Generate one round's draw. Returns the eligible team count."""
        count = self.draws.generate_round(event_id, round_number, reseed=reseed, seed_runs=seed_runs)
        self._log_activity("generate_draw", "draw", None, f"Event {event_id} Round {round_number}")
        return count

    def generate_batch_draw(self, event_id: int, rounds: int, shuffle: bool = False) -> int:
        """Generate rounds 1..rounds. Returns the total assignment count."""
        total = self.draws.generate_batch(event_id, rounds, shuffle)
        self._log_activity("generate_draw_batch", "draw", None, f"Event {event_id} Rounds {rounds}")
        return total

    def get_draw(self, event_id: int, round_number: int) -> List[Dict[str, Any]]:
        return self.draws.get_draw(event_id, round_number)

    # ── Runs ───────────────────────────────────────────────────

    def record_run(self, payload: Union[RunResult, Mapping[str, Any]]) -> int:
        """Record a captured result. Returns the run id."""
        result = parse_payload(RunResult, payload)
        run_id = self.tracker.record_result(result)
        self._log_activity("save_run", "run", run_id, f"Event {result.event_id} Round {result.round}")
        return run_id

    def get_runs(self, event_id: int, round_number: Optional[int] = None) -> List[RunRecord]:
        return self.store.load_runs(event_id, round_number)

    # ── Standings ──────────────────────────────────────────────

    def get_standings(self, event_id: int) -> List[Standing]:
        """Rank every team with runs in the event; empty when there are none."""
        self.store.require_event(event_id)
        return aggregate_standings(self.store.load_runs(event_id))

    # ── Payoffs ────────────────────────────────────────────────

    def create_payoff_rule(self, payload: Payload) -> int:
        """
        Create the rule for a finishing position, or update and reactivate
        the existing one at that position.

        Raises:
            ValidationError: If the percentage is outside [0, 1]
            NotFoundError: If the event does not exist
        """
        data = parse_payload(NewPayoffRule, payload)
        self.store.require_event(data.event_id)
        existing = self.store.payoffs.find_by_position(data.event_id, data.position)
        if existing is not None:
            self.store.payoffs.reactivate(existing["id"], data.percentage)
            self._log_activity("update_payoff_rule", "payoff_rule", existing["id"])
            return existing["id"]

        rule_id = self.store.payoffs.create_rule(data.event_id, data.position, data.percentage)
        self._log_activity("create_payoff_rule", "payoff_rule", rule_id)
        return rule_id

    def list_payoff_rules(self, event_id: int) -> List[PayoffRule]:
        return self.store.load_payoff_rules(event_id)

    def delete_payoff_rule(self, rule_id: int) -> None:
        if self.store.payoffs.deactivate(rule_id) == 0:
            raise NotFoundError("payoff_rule", rule_id)
        self._log_activity("delete_payoff_rule", "payoff_rule", rule_id, RuleStatus.INACTIVE.value)

    def get_payout_breakdown(self, event_id: int) -> PayoutBreakdown:
        """
        Compute the pot and allocations from current rows.

        Raises:
            NotFoundError: If the event does not exist
        """
        financials = self.store.load_event_financials(event_id)
        return compute_payout(
            financials,
            self.store.count_active_teams(event_id),
            self.store.load_payoff_rules(event_id),
        )
