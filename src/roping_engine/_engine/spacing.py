# Area: Engine
"""
roping_engine._engine.spacing — Roper spacing heuristic
=======================================================

Re-sequences a round so that teams sharing a roper (same header or
heeler, in either role) run as far apart as possible. Greedy and
non-backtracking: it improves spacing but may miss a conflict-free
order that exists.
"""

import random
from itertools import islice
from typing import List, Sequence

from ..types import TeamRef

# Placed slots scanned backwards for a conflicting team
LOOKBACK_WINDOW = 10

# A candidate scoring at least this is taken without scanning further
EARLY_ACCEPT_SCORE = 10

# Score of a candidate with no conflict inside the window
NO_CONFLICT_SCORE = 100


def conflict_distance(ordered: Sequence[TeamRef], candidate: TeamRef) -> int:
    """
    Score a candidate against the most recently placed teams.

    Returns:
        Distance (1 = last placed) to the nearest team sharing a roper
        within the window, or NO_CONFLICT_SCORE when there is none
    """
    spacing = 0
    for prev in islice(reversed(ordered), LOOKBACK_WINDOW):
        spacing += 1
        if prev.shares_roper_with(candidate):
            return spacing
    return NO_CONFLICT_SCORE


def greedy_space(teams: Sequence[TeamRef]) -> List[TeamRef]:
    """
    Greedily order teams to maximise distance between shared ropers.

    The pool is scanned in its current order; a candidate replaces the
    best so far only on a strictly higher score, and a score of
    EARLY_ACCEPT_SCORE or more ends the scan.
    """
    ordered: List[TeamRef] = []
    pool = list(teams)

    while pool:
        best_idx = 0
        best_score = -1
        for i, candidate in enumerate(pool):
            score = conflict_distance(ordered, candidate)
            if score > best_score:
                best_score = score
                best_idx = i
                if score >= EARLY_ACCEPT_SCORE:
                    break
        ordered.append(pool.pop(best_idx))

    return ordered


def space_by_roper(teams: Sequence[TeamRef], rng: random.Random) -> List[TeamRef]:
    """Shuffle with ``rng``, then apply the greedy spacing pass."""
    working = list(teams)
    rng.shuffle(working)
    return greedy_space(working)
