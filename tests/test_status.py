"""Tests for taskdeps.status — the status transition table."""

from __future__ import annotations

import pytest

from taskdeps.errors import InvalidTransitionError
from taskdeps.status import (
    VALID_TRANSITIONS,
    allowed_transitions,
    can_transition,
    ensure_transition,
    parse_status,
)
from taskdeps.tasks.model import TaskStatus

P = TaskStatus.PENDING
IP = TaskStatus.IN_PROGRESS
C = TaskStatus.COMPLETED
B = TaskStatus.BLOCKED
X = TaskStatus.CANCELLED

ALLOWED = {
    (P, IP), (P, C), (P, B), (P, X),
    (IP, C), (IP, B), (IP, P), (IP, X),
    (C, P), (C, IP),
    (B, P), (B, IP), (B, X),
    (X, P),
}


class TestTransitionTable:
    """The table covers every status and matches the documented transitions."""

    def test_every_status_has_an_entry(self):
        assert set(VALID_TRANSITIONS) == set(TaskStatus)

    def test_table_matches_documented_pairs(self):
        pairs = {(cur, nxt) for cur, targets in VALID_TRANSITIONS.items() for nxt in targets}
        assert pairs == ALLOWED

    @pytest.mark.parametrize("status", list(TaskStatus))
    def test_same_state_is_allowed(self, status):
        assert can_transition(status, status) is True
        ensure_transition("T1", status, status)

    def test_cancelled_can_only_reopen(self):
        assert allowed_transitions(X) == frozenset({P})

    def test_completed_can_reopen(self):
        assert can_transition(C, P) is True
        assert can_transition(C, IP) is True
        assert can_transition(C, B) is False
        assert can_transition(C, X) is False


class TestEnsureTransition:
    """ensure_transition raises for anything outside the table."""

    def test_rejects_cancelled_to_completed(self):
        with pytest.raises(InvalidTransitionError) as exc:
            ensure_transition("T1", X, C)
        assert exc.value.task_id == "T1"
        assert exc.value.current == "cancelled"
        assert exc.value.target == "completed"
        assert "cancelled -> completed" in str(exc.value)

    def test_rejects_blocked_to_completed(self):
        with pytest.raises(InvalidTransitionError):
            ensure_transition("T1", B, C)

    def test_accepts_listed_transition(self):
        ensure_transition("T1", P, IP)


class TestParseStatus:
    def test_accepts_enum(self):
        assert parse_status(C) is C

    @pytest.mark.parametrize("raw", ["in_progress", "IN_PROGRESS", "in-progress", " in progress "])
    def test_normalizes_spelling(self, raw):
        assert parse_status(raw) is IP

    def test_unknown_status(self):
        with pytest.raises(ValueError, match="Unknown status"):
            parse_status("done")
