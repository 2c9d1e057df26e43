# Area: Engine
"""
Engine - draw, run-state, standings and payout logic.

This package handles:
- Run lifecycle and elimination cascade
- Per-round and batch draw generation with roper spacing
- Standings aggregation and ranking
- Payout computation
"""

from .run_state import RunStateTracker
from .draw import DrawGenerator
from .standings import aggregate_standings
from .payout import compute_payout, DEDUCTION_RATE

__all__ = [
    "RunStateTracker",
    "DrawGenerator",
    "aggregate_standings",
    "compute_payout",
    "DEDUCTION_RATE",
]
