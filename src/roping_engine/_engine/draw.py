# Area: Engine
"""
roping_engine._engine.draw — Draw Generator
===========================================

Computes the teams eligible to run in an event and writes the run
order for one round, or for a block of rounds at once.
"""

import logging
import random
from typing import Any, Dict, List, Optional

from ..enums import EventStatus, parse_event_status
from ..errors import EmptyInputError, StateError, ValidationError
from ..types import DrawEntry, TeamRef
from .._store.store import TournamentStore
from .spacing import space_by_roper

logger = logging.getLogger("roping_engine.draw")


def to_entries(teams: List[TeamRef]) -> List[DrawEntry]:
    """Number teams 1..N in the given order."""
    return [DrawEntry(position=i, team_id=t.id) for i, t in enumerate(teams, start=1)]


class DrawGenerator:
    """
    Generates per-round run orders.

    Randomness comes only from ``rng`` so that a seeded generator gives
    reproducible draws.

    Attributes:
        store: Persistence collaborator
        rng: Source of shuffles
    """

    def __init__(self, store: TournamentStore, rng: Optional[random.Random] = None):
        self.store = store
        self.rng = rng if rng is not None else random.Random()

    def eligible_teams(self, event_id: int) -> List[TeamRef]:
        """
        Get active teams that have not been eliminated, ordered by id.

        A team with any NT or DQ run in the event is out for good,
        whichever round produced it.

        Raises:
            EmptyInputError: If no team is eligible
        """
        eliminated = self.store.load_eliminated_team_ids(event_id)
        teams = [t for t in self.store.load_active_teams(event_id) if t.id not in eliminated]
        if not teams:
            raise EmptyInputError(event_id)
        return teams

    def generate_round(
        self,
        event_id: int,
        round_number: int,
        reseed: bool = True,
        seed_runs: bool = True,
    ) -> int:
        """
        Generate (or regenerate) the draw of one round.

        The previous draw and runs of the round are replaced in a single
        transaction, so positions always form 1..N.

        Args:
            event_id: Event identifier
            round_number: Round to draw (>= 1)
            reseed: Shuffle the eligible teams; otherwise keep id order
            seed_runs: Also create one pending run per team

        Returns:
            Number of eligible teams drawn

        Raises:
            NotFoundError: If the event does not exist
            StateError: If the event is terminal or the round has results
            EmptyInputError: If no team is eligible
        """
        _require_round(round_number, "round")
        event = self.store.require_event(event_id)
        status = parse_event_status(event["status"])
        if status.is_terminal:
            logger.warning("Draw refused: event %d is %s", event_id, status.value)
            raise StateError(
                f"Event {event_id} is {status.value}; rounds can no longer change",
                event_id=event_id, status=status.value,
            )

        if self.store.round_has_completed_runs(event_id, round_number):
            logger.warning("Draw refused: round %d of event %d has results", round_number, event_id)
            raise StateError(
                f"Round {round_number} has already started (captured times); it cannot be regenerated",
                event_id=event_id, round=round_number,
            )

        teams = self.eligible_teams(event_id)
        if reseed:
            self.rng.shuffle(teams)

        self.store.replace_round(event_id, round_number, to_entries(teams), seed_runs=seed_runs)
        logger.info(
            "Generated draw for event %d round %d: %d teams (reseed=%s, seed_runs=%s)",
            event_id, round_number, len(teams), reseed, seed_runs,
        )
        return len(teams)

    def generate_batch(self, event_id: int, rounds: int, shuffle: bool) -> int:
        """
        Generate draws and pending runs for rounds 1..rounds at once.

        The eligible list is computed once and reused for every round.
        With ``shuffle`` each round gets a fresh shuffle followed by the
        roper spacing pass. All rounds commit together.

        Args:
            event_id: Event identifier
            rounds: Number of rounds to draw (>= 1)
            shuffle: Shuffle and space each round

        Returns:
            Total number of draw assignments written

        Raises:
            NotFoundError: If the event does not exist
            StateError: If the event is locked
            EmptyInputError: If no team is eligible
        """
        _require_round(rounds, "rounds")
        event = self.store.require_event(event_id)
        if parse_event_status(event["status"]) is EventStatus.LOCKED:
            logger.warning("Batch draw refused: event %d is locked", event_id)
            raise StateError(
                f"Event {event_id} is locked; no changes allowed",
                event_id=event_id, status=EventStatus.LOCKED.value,
            )

        teams = self.eligible_teams(event_id)

        with self.store.transaction() as conn:
            for round_number in range(1, rounds + 1):
                if shuffle:
                    teams = space_by_roper(teams, self.rng)
                self.store.upsert_round(event_id, round_number, to_entries(teams), conn=conn)

        total = len(teams) * rounds
        logger.info(
            "Generated batch draw for event %d: %d rounds x %d teams (shuffle=%s)",
            event_id, rounds, len(teams), shuffle,
        )
        return total

    def get_draw(self, event_id: int, round_number: int) -> List[Dict[str, Any]]:
        """Get the draw of a round in position order."""
        return self.store.draws.get_draw(event_id, round_number)


def _require_round(value: int, field: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(field, f"must be a positive integer, got {value!r}")
