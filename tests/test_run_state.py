# Area: Engine Tests
"""Tests for the Run State Tracker."""

import os
import tempfile

import pytest

from roping_engine import TournamentService
from roping_engine._engine.run_state import (
    RunStateTracker,
    TRANSITIONS,
    next_status,
)
from roping_engine._store import init_database
from roping_engine.enums import RunEvent, RunStatus
from roping_engine.errors import NotFoundError, ValidationError


class TestTransitions:
    """Tests for the run transition table."""

    def test_capture_completes_from_any_state(self):
        for status in RunStatus:
            assert next_status(status, RunEvent.RESULT_CAPTURED) is RunStatus.COMPLETED

    def test_elimination_skips_from_any_state(self):
        for status in RunStatus:
            assert next_status(status, RunEvent.ELIMINATED_EARLIER) is RunStatus.SKIPPED

    def test_correction_only_restores_skipped(self):
        assert next_status(RunStatus.SKIPPED, RunEvent.ELIMINATION_CORRECTED) is RunStatus.PENDING

    @pytest.mark.parametrize("status", [RunStatus.PENDING, RunStatus.COMPLETED])
    def test_invalid_correction(self, status):
        with pytest.raises(ValueError, match="Invalid run transition"):
            next_status(status, RunEvent.ELIMINATION_CORRECTED)

    def test_all_states_present(self):
        assert set(TRANSITIONS) == set(RunStatus)


class TestRunStateTracker:
    """Tests for RunStateTracker.record_result()."""

    @pytest.fixture
    def service(self):
        fd, path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        init_database(path)
        yield TournamentService(path)
        os.unlink(path)

    @pytest.fixture
    def event_id(self, service):
        return service.create_event({"name": "Open", "date": "2026-06-01", "rounds": 3})

    @pytest.fixture
    def team_id(self, service, event_id):
        header = service.create_roper({"first_name": "Hank", "last_name": "Lee", "specialty": "header"})
        heeler = service.create_roper({"first_name": "Ike", "last_name": "Cruz", "specialty": "heeler"})
        team_id = service.create_team({"event_id": event_id, "header_id": header, "heeler_id": heeler})
        service.generate_batch_draw(event_id, 3)
        return team_id

    @pytest.fixture
    def tracker(self, service):
        return RunStateTracker(service.store)

    def _statuses(self, service, event_id):
        return [r.status for r in service.get_runs(event_id)]

    def _result(self, event_id, team_id, round_number, **fields):
        return {"event_id": event_id, "team_id": team_id, "round": round_number, "position": 1, **fields}

    def test_valid_time_completes_run(self, service, tracker, event_id, team_id):
        run_id = tracker.record_result(self._result(event_id, team_id, 1, time_sec=7.2, penalty=5))
        run = service.store.runs.get_run(run_id)
        assert run.status is RunStatus.COMPLETED
        assert run.total_sec == pytest.approx(12.2)
        assert self._statuses(service, event_id) == [
            RunStatus.COMPLETED, RunStatus.PENDING, RunStatus.PENDING,
        ]

    def test_dq_skips_later_rounds(self, service, tracker, event_id, team_id):
        """Test a DQ moves every later round to skipped."""
        tracker.record_result(self._result(event_id, team_id, 1, dq=True))
        assert self._statuses(service, event_id) == [
            RunStatus.COMPLETED, RunStatus.SKIPPED, RunStatus.SKIPPED,
        ]
        assert tracker.is_eliminated(event_id, team_id)

    def test_nt_skips_completed_later_round(self, service, tracker, event_id, team_id):
        tracker.record_result(self._result(event_id, team_id, 2, time_sec=8.0))
        tracker.record_result(self._result(event_id, team_id, 1, no_time=True))
        assert self._statuses(service, event_id) == [
            RunStatus.COMPLETED, RunStatus.SKIPPED, RunStatus.SKIPPED,
        ]

    def test_elimination_leaves_earlier_rounds(self, service, tracker, event_id, team_id):
        tracker.record_result(self._result(event_id, team_id, 1, time_sec=8.0))
        tracker.record_result(self._result(event_id, team_id, 2, dq=True))
        assert self._statuses(service, event_id) == [
            RunStatus.COMPLETED, RunStatus.COMPLETED, RunStatus.SKIPPED,
        ]

    def test_correction_restores_skipped(self, service, tracker, event_id, team_id):
        """Test replacing a DQ with a valid time reopens later rounds."""
        tracker.record_result(self._result(event_id, team_id, 1, dq=True))
        run_id = tracker.record_result(self._result(event_id, team_id, 1, time_sec=9.1))
        assert self._statuses(service, event_id) == [
            RunStatus.COMPLETED, RunStatus.PENDING, RunStatus.PENDING,
        ]
        run = service.store.runs.get_run(run_id)
        assert not run.dq
        assert run.total_sec == pytest.approx(9.1)
        assert not tracker.is_eliminated(event_id, team_id)

    def test_restore_only_touches_skipped(self, service, tracker, event_id, team_id):
        tracker.record_result(self._result(event_id, team_id, 3, time_sec=6.5))
        tracker.record_result(self._result(event_id, team_id, 1, time_sec=7.0))
        runs = service.get_runs(event_id)
        assert [r.status for r in runs] == [
            RunStatus.COMPLETED, RunStatus.PENDING, RunStatus.COMPLETED,
        ]
        assert runs[2].total_sec == pytest.approx(6.5)

    def test_record_without_seeded_run(self, service, tracker, event_id, team_id):
        """Test a capture for an undrawn round inserts the run."""
        tracker.record_result(self._result(event_id, team_id, 5, time_sec=7.7))
        runs = service.get_runs(event_id, 5)
        assert len(runs) == 1
        assert runs[0].status is RunStatus.COMPLETED

    def test_unknown_event(self, tracker, team_id):
        with pytest.raises(NotFoundError) as exc:
            tracker.record_result(self._result(99, team_id, 1, time_sec=7.0))
        assert exc.value.entity == "event"

    def test_team_from_other_event(self, service, tracker, event_id, team_id):
        other = service.create_event({"name": "Other", "date": "2026-07-01"})
        with pytest.raises(NotFoundError) as exc:
            tracker.record_result(self._result(other, team_id, 1, time_sec=7.0))
        assert exc.value.entity == "team"

    def test_invalid_payload_writes_nothing(self, service, tracker, event_id, team_id):
        with pytest.raises(ValidationError):
            tracker.record_result(self._result(event_id, team_id, 1, time_sec=-2.0))
        assert self._statuses(service, event_id) == [RunStatus.PENDING] * 3

    def test_eliminated_team_ids(self, tracker, event_id, team_id):
        assert tracker.eliminated_team_ids(event_id) == set()
        tracker.record_result(self._result(event_id, team_id, 2, no_time=True))
        assert tracker.eliminated_team_ids(event_id) == {team_id}

    def test_capture_over_skipped_round(self, service, tracker, event_id, team_id):
        """Test a time entered for a skipped round completes it without reopening others."""
        tracker.record_result(self._result(event_id, team_id, 1, dq=True))
        tracker.record_result(self._result(event_id, team_id, 2, time_sec=8.4))
        assert self._statuses(service, event_id) == [
            RunStatus.COMPLETED, RunStatus.COMPLETED, RunStatus.SKIPPED,
        ]
        assert tracker.is_eliminated(event_id, team_id)
