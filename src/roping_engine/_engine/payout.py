# Area: Engine
"""
roping_engine._engine.payout — Payout Calculator
================================================

Pure function from pot inputs and payoff rules to a money breakdown.
Rule percentages are not required to sum to 1.0; partial and
over-allocated structures are both computed as given.
"""

from typing import Iterable

from ..types import EventFinancials, PayoffRule, PayoutAllocation, PayoutBreakdown

# Share of the pot withheld before allocation
DEDUCTION_RATE = 0.0


def compute_payout(
    financials: EventFinancials,
    active_team_count: int,
    rules: Iterable[PayoffRule],
    deduction_rate: float = DEDUCTION_RATE,
) -> PayoutBreakdown:
    """
    Compute the pot and each place's share.

    total_pot = prize_pool + entry_fee * active_team_count
    net_pot   = total_pot - total_pot * deduction_rate
    amount    = net_pot * percentage, per rule

    Args:
        financials: Entry fee and prize pool (absent values already 0)
        active_team_count: Number of active teams in the event
        rules: Active payoff rules, ordered by position
        deduction_rate: Fraction of the pot withheld

    Returns:
        PayoutBreakdown with one allocation per rule
    """
    total_pot = financials.prize_pool + financials.entry_fee * active_team_count
    deductions = total_pot * deduction_rate
    net_pot = total_pot - deductions
    payouts = [
        PayoutAllocation(place=r.position, percentage=r.percentage, amount=net_pot * r.percentage)
        for r in rules
    ]
    return PayoutBreakdown(
        total_pot=total_pot,
        deductions=deductions,
        net_pot=net_pot,
        payouts=payouts,
    )
