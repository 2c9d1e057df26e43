# Area: Core Tests
"""Tests for TournamentService."""

import os
import random
import sqlite3
import tempfile
from unittest.mock import Mock

import pytest

from roping_engine import TournamentService
from roping_engine._store import init_database
from roping_engine.enums import EventStatus
from roping_engine.errors import ConflictError, NotFoundError, StateError, ValidationError


@pytest.fixture
def service():
    """Service over a temporary database."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    init_database(path)
    yield TournamentService(path)
    os.unlink(path)


@pytest.fixture
def event_id(service):
    return service.create_event({
        "name": "Summer Jackpot", "date": "2026-08-01", "rounds": 2,
        "entry_fee": 20, "prize_pool": 100,
    })


def _roper(service, name, specialty="both"):
    return service.create_roper({"first_name": name, "last_name": "Test", "specialty": specialty})


class TestEvents:
    def test_create_defaults(self, service):
        event = service.get_event(service.create_event({"name": "Open", "date": "2026-01-01"}))
        assert event["status"] == "upcoming"
        assert event["rounds"] == 1
        assert event["entry_fee"] is None

    def test_draft_alias(self, service):
        """Test 'draft' is stored as upcoming."""
        event_id = service.create_event({"name": "Open", "date": "2026-01-01", "status": "draft"})
        assert service.get_event(event_id)["status"] == "upcoming"

    def test_unknown_status(self, service):
        with pytest.raises(ValidationError):
            service.create_event({"name": "Open", "date": "2026-01-01", "status": "paused"})

    def test_invalid_rounds(self, service):
        with pytest.raises(ValidationError):
            service.create_event({"name": "Open", "date": "2026-01-01", "rounds": 0})

    def test_update_status(self, service, event_id):
        assert service.update_event_status(event_id, "ACTIVE") is EventStatus.ACTIVE
        assert service.get_event(event_id)["status"] == "active"

    def test_update_status_missing(self, service):
        with pytest.raises(NotFoundError):
            service.update_event_status(9, "active")

    def test_lock(self, service, event_id):
        service.lock_event(event_id)
        assert service.get_event(event_id)["status"] == "locked"

    def test_get_missing(self, service):
        with pytest.raises(NotFoundError):
            service.get_event(9)


class TestRopers:
    def test_update_only_given_fields(self, service):
        """Test partial updates leave other fields alone."""
        roper_id = _roper(service, "Ana", "header")
        service.update_roper(roper_id, {"specialty": "HEELER", "rating": 8})
        roper = service.store.ropers.get_roper(roper_id)
        assert roper["specialty"] == "heeler"
        assert roper["rating"] == 8
        assert roper["first_name"] == "Ana"
        assert roper["level"] == "amateur"

    def test_clear_optional_field(self, service):
        roper_id = service.create_roper({
            "first_name": "Ana", "last_name": "Test", "specialty": "both", "phone": "555",
        })
        service.update_roper(roper_id, {"phone": None})
        assert service.store.ropers.get_roper(roper_id)["phone"] is None

    def test_clear_required_field(self, service):
        roper_id = _roper(service, "Ana")
        with pytest.raises(ValidationError) as exc:
            service.update_roper(roper_id, {"first_name": None})
        assert exc.value.field == "first_name"

    def test_update_missing(self, service):
        with pytest.raises(NotFoundError):
            service.update_roper(5, {"rating": 1})

    def test_delete(self, service):
        roper_id = _roper(service, "Ana")
        service.delete_roper(roper_id)
        assert service.list_ropers() == []
        with pytest.raises(NotFoundError):
            service.delete_roper(99)


class TestTeams:
    def test_create_and_list(self, service, event_id):
        a, b = _roper(service, "Ana"), _roper(service, "Ben")
        team_id = service.create_team({"event_id": event_id, "header_id": a, "heeler_id": b, "rating": 3.5})
        teams = service.list_teams(event_id)
        assert [t["id"] for t in teams] == [team_id]
        assert teams[0]["rating"] == 3.5

    def test_same_roper_twice(self, service, event_id):
        a = _roper(service, "Ana")
        with pytest.raises(ValidationError) as exc:
            service.create_team({"event_id": event_id, "header_id": a, "heeler_id": a})
        assert exc.value.field == "heeler_id"

    def test_duplicate_pairing(self, service, event_id):
        a, b = _roper(service, "Ana"), _roper(service, "Ben")
        service.create_team({"event_id": event_id, "header_id": a, "heeler_id": b})
        with pytest.raises(ConflictError):
            service.create_team({"event_id": event_id, "header_id": a, "heeler_id": b})

    def test_missing_roper(self, service, event_id):
        a = _roper(service, "Ana")
        with pytest.raises(NotFoundError) as exc:
            service.create_team({"event_id": event_id, "header_id": a, "heeler_id": 77})
        assert exc.value.entity == "roper"

    def test_locked_event_refuses_roster_changes(self, service, event_id):
        """Test teams cannot be added or changed once an event is locked."""
        a, b, c = _roper(service, "Ana"), _roper(service, "Ben"), _roper(service, "Cal")
        team_id = service.create_team({"event_id": event_id, "header_id": a, "heeler_id": b})
        service.lock_event(event_id)
        with pytest.raises(StateError):
            service.create_team({"event_id": event_id, "header_id": a, "heeler_id": c})
        with pytest.raises(StateError):
            service.update_team(team_id, {"rating": 2.0})
        with pytest.raises(StateError):
            service.delete_team(team_id)

    def test_update_team(self, service, event_id):
        a, b = _roper(service, "Ana"), _roper(service, "Ben")
        team_id = service.create_team({"event_id": event_id, "header_id": a, "heeler_id": b})
        service.update_team(team_id, {"rating": 7.0, "status": "inactive"})
        team = service.store.get_team(team_id)
        assert team["rating"] == 7.0
        assert team["status"] == "inactive"
        assert service.list_teams(event_id) == []

    def test_delete_team(self, service, event_id):
        a, b = _roper(service, "Ana"), _roper(service, "Ben")
        team_id = service.create_team({"event_id": event_id, "header_id": a, "heeler_id": b})
        service.delete_team(team_id)
        assert service.store.get_team(team_id)["status"] == "inactive"
        with pytest.raises(NotFoundError):
            service.delete_team(404)


class TestStandingsAndPayout:
    @pytest.fixture
    def team_ids(self, service, event_id):
        ropers = [_roper(service, f"R{i}") for i in range(10)]
        return [
            service.create_team({"event_id": event_id, "header_id": ropers[i], "heeler_id": ropers[i + 1]})
            for i in range(0, 10, 2)
        ]

    def test_standings_from_recorded_runs(self, service, event_id, team_ids):
        service.generate_round_draw(event_id, 1, reseed=False)
        a, b, c = team_ids[:3]
        service.record_run({"event_id": event_id, "team_id": a, "round": 1, "position": 1, "time_sec": 9.0})
        service.record_run({"event_id": event_id, "team_id": b, "round": 1, "position": 2, "time_sec": 6.0, "penalty": 5})
        service.record_run({"event_id": event_id, "team_id": c, "round": 1, "position": 3, "no_time": True})
        table = service.get_standings(event_id)
        assert [s.team_id for s in table[:3]] == [a, b, c]
        assert len(table) == 5
        assert table[0].header_name == "R0 Test"
        assert table[2].nt_count == 1

    def test_standings_missing_event(self, service):
        with pytest.raises(NotFoundError):
            service.get_standings(9)

    def test_standings_empty(self, service, event_id):
        assert service.get_standings(event_id) == []

    def test_payout_breakdown(self, service, event_id, team_ids):
        """Test the 5-team jackpot pays 100/60/40."""
        for position, pct in ((1, 0.5), (2, 0.3), (3, 0.2)):
            service.create_payoff_rule({"event_id": event_id, "position": position, "percentage": pct})
        breakdown = service.get_payout_breakdown(event_id)
        assert breakdown.total_pot == pytest.approx(200.0)
        assert [p.amount for p in breakdown.payouts] == pytest.approx([100.0, 60.0, 40.0])

    def test_inactive_teams_not_in_pot(self, service, event_id, team_ids):
        service.delete_team(team_ids[0])
        assert service.get_payout_breakdown(event_id).total_pot == pytest.approx(180.0)

    def test_payout_missing_event(self, service):
        with pytest.raises(NotFoundError):
            service.get_payout_breakdown(9)


class TestPayoffRules:
    def test_recreate_reactivates_same_row(self, service, event_id):
        """Test a deleted rule comes back under the same id."""
        rule_id = service.create_payoff_rule({"event_id": event_id, "position": 1, "percentage": 0.5})
        service.delete_payoff_rule(rule_id)
        assert service.list_payoff_rules(event_id) == []
        again = service.create_payoff_rule({"event_id": event_id, "position": 1, "percentage": 0.7})
        assert again == rule_id
        assert [r.percentage for r in service.list_payoff_rules(event_id)] == [0.7]

    def test_delete_twice(self, service, event_id):
        rule_id = service.create_payoff_rule({"event_id": event_id, "position": 1, "percentage": 0.5})
        service.delete_payoff_rule(rule_id)
        with pytest.raises(NotFoundError):
            service.delete_payoff_rule(rule_id)

    def test_invalid_percentage(self, service, event_id):
        with pytest.raises(ValidationError):
            service.create_payoff_rule({"event_id": event_id, "position": 1, "percentage": 1.5})

    def test_missing_event(self, service):
        with pytest.raises(NotFoundError):
            service.create_payoff_rule({"event_id": 9, "position": 1, "percentage": 0.5})


class TestActivity:
    def test_operations_are_recorded(self, service, event_id):
        _roper(service, "Ana")
        actions = [r["action"] for r in service.recent_activity()]
        assert actions == ["create_roper", "create_event"]

    def test_activity_failure_does_not_fail_operation(self, service):
        """Test a broken activity write is logged and swallowed."""
        service.store.activity = Mock()
        service.store.activity.record.side_effect = sqlite3.OperationalError("database is locked")
        event_id = service.create_event({"name": "Open", "date": "2026-01-01"})
        assert service.get_event(event_id)["name"] == "Open"
        service.store.activity.record.assert_called_once()


class TestFromConfig:
    def test_seeded_rng(self, tmp_path):
        db = str(tmp_path / "t.db")
        service = TournamentService.from_config({"db_path": db, "draw_seed": 3})
        assert service.store.db_path == db
        assert service.draws.rng.random() == random.Random(3).random()

    def test_unseeded(self, tmp_path):
        service = TournamentService.from_config({"db_path": str(tmp_path / "t.db"), "draw_seed": None})
        assert isinstance(service.draws.rng, random.Random)
