# Area: Engine
"""
roping_engine._engine.standings — Standings Aggregator
======================================================

Reduces every run of an event to one ranked row per team.

Ranking, most desirable first:
  1. valid completed runs, descending
  2. total time, ascending, absent last
  3. best single-run time, ascending, absent last
  4. team id, ascending
Ranks are 1-based positions in that order and are never shared.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from ..types import RunRecord, Standing


@dataclass
class _TeamTally:
    team_id: int
    header_name: str
    heeler_name: str
    completed_runs: int = 0
    totals: List[float] = field(default_factory=list)
    nt_count: int = 0
    dq_count: int = 0

    @property
    def total_time(self) -> Optional[float]:
        return sum(self.totals) if self.totals else None

    @property
    def best_time(self) -> Optional[float]:
        return min(self.totals) if self.totals else None

    @property
    def avg_time(self) -> Optional[float]:
        return sum(self.totals) / len(self.totals) if self.totals else None


def _absent_last(value: Optional[float]) -> Tuple[int, float]:
    return (1, 0.0) if value is None else (0, value)


def ranking_key(tally: _TeamTally) -> tuple:
    return (
        -tally.completed_runs,
        _absent_last(tally.total_time),
        _absent_last(tally.best_time),
        tally.team_id,
    )


def aggregate_standings(runs: Iterable[RunRecord]) -> List[Standing]:
    """
    Build the ranked standings table.

    Only runs that are completed with neither NT nor DQ count towards
    times; NT and DQ flags are counted whatever the run status.

    Args:
        runs: Every run of one event

    Returns:
        Standings ordered by rank; empty when there are no runs
    """
    tallies: Dict[int, _TeamTally] = {}
    for run in runs:
        tally = tallies.get(run.team_id)
        if tally is None:
            tally = tallies[run.team_id] = _TeamTally(
                run.team_id, run.header_name, run.heeler_name
            )
        if run.is_valid_completed:
            tally.completed_runs += 1
            if run.total_sec is not None:
                tally.totals.append(run.total_sec)
        if run.no_time:
            tally.nt_count += 1
        if run.dq:
            tally.dq_count += 1

    ranked = sorted(tallies.values(), key=ranking_key)
    return [
        Standing(
            rank=rank,
            team_id=t.team_id,
            header_name=t.header_name,
            heeler_name=t.heeler_name,
            total_time=t.total_time,
            completed_runs=t.completed_runs,
            nt_count=t.nt_count,
            dq_count=t.dq_count,
            avg_time=t.avg_time,
            best_time=t.best_time,
        )
        for rank, t in enumerate(ranked, start=1)
    ]
