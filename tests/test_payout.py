# Area: Engine Tests
"""Tests for the Payout Calculator."""

import pytest

from roping_engine._engine.payout import compute_payout
from roping_engine.types import EventFinancials, PayoffRule


def _rules(*percentages):
    return [
        PayoffRule(id=i, event_id=1, position=i, percentage=p)
        for i, p in enumerate(percentages, start=1)
    ]


class TestComputePayout:
    """Tests for compute_payout()."""

    def test_pot_from_fees_and_prize(self):
        """Test the 5-team jackpot example."""
        breakdown = compute_payout(EventFinancials(entry_fee=20, prize_pool=100), 5, _rules(0.5, 0.3, 0.2))
        assert breakdown.total_pot == pytest.approx(200.0)
        assert breakdown.deductions == 0.0
        assert breakdown.net_pot == pytest.approx(200.0)
        assert [p.amount for p in breakdown.payouts] == pytest.approx([100.0, 60.0, 40.0])
        assert [p.place for p in breakdown.payouts] == [1, 2, 3]

    def test_no_rules(self):
        breakdown = compute_payout(EventFinancials(entry_fee=10, prize_pool=0), 3, [])
        assert breakdown.total_pot == pytest.approx(30.0)
        assert breakdown.payouts == []

    def test_no_teams_only_prize(self):
        breakdown = compute_payout(EventFinancials(entry_fee=50, prize_pool=250), 0, _rules(1.0))
        assert breakdown.total_pot == pytest.approx(250.0)
        assert breakdown.payouts[0].amount == pytest.approx(250.0)

    def test_absent_financials(self):
        breakdown = compute_payout(EventFinancials(), 4, _rules(0.6, 0.4))
        assert breakdown.total_pot == 0.0
        assert [p.amount for p in breakdown.payouts] == [0.0, 0.0]

    def test_partial_allocation(self):
        """Test percentages need not sum to one."""
        breakdown = compute_payout(EventFinancials(prize_pool=100), 0, _rules(0.4))
        assert sum(p.amount for p in breakdown.payouts) == pytest.approx(40.0)

    def test_over_allocation(self):
        breakdown = compute_payout(EventFinancials(prize_pool=100), 0, _rules(0.8, 0.5))
        assert sum(p.amount for p in breakdown.payouts) == pytest.approx(130.0)

    def test_deduction_rate(self):
        breakdown = compute_payout(EventFinancials(prize_pool=200), 0, _rules(0.5), deduction_rate=0.1)
        assert breakdown.deductions == pytest.approx(20.0)
        assert breakdown.net_pot == pytest.approx(180.0)
        assert breakdown.payouts[0].amount == pytest.approx(90.0)

    def test_amounts_linear_in_percentage(self):
        breakdown = compute_payout(EventFinancials(entry_fee=15, prize_pool=40), 6, _rules(0.1, 0.2, 0.4))
        a, b, c = (p.amount for p in breakdown.payouts)
        assert b == pytest.approx(2 * a)
        assert c == pytest.approx(4 * a)
        assert a == pytest.approx(breakdown.net_pot * 0.1)

    def test_amounts_scale_with_net_pot(self):
        """Test doubling the fee and the prize pool doubles every place."""
        rules = _rules(0.5, 0.3, 0.2)
        base = compute_payout(EventFinancials(entry_fee=15, prize_pool=40), 6, rules)
        doubled = compute_payout(EventFinancials(entry_fee=30, prize_pool=80), 6, rules)
        assert doubled.net_pot == pytest.approx(2 * base.net_pot)
        assert [p.amount for p in doubled.payouts] == pytest.approx(
            [2 * p.amount for p in base.payouts]
        )
