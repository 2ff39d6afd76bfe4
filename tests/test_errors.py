"""Tests for taskdeps.errors — exception hierarchy and messages."""

from __future__ import annotations

import pytest

from taskdeps.errors import (
    DependencyValidationError,
    DuplicateTaskError,
    InvalidTransitionError,
    ResourceLimitError,
    TaskDepsError,
    TaskListFormatError,
    TaskNotFoundError,
)
from taskdeps.tasks.validate import ValidationResult


@pytest.mark.parametrize(
    "exc",
    [
        ResourceLimitError(10, 11),
        InvalidTransitionError("A", "completed", "cancelled"),
        DependencyValidationError("A", ValidationResult(errors=["boom"])),
        TaskNotFoundError("A"),
        DuplicateTaskError("A"),
        TaskListFormatError("bad file"),
    ],
)
def test_all_errors_share_base(exc):
    """The CLI relies on catching TaskDepsError for every hard failure."""
    assert isinstance(exc, TaskDepsError)


def test_resource_limit_fields():
    exc = ResourceLimitError(10, 11)
    assert (exc.limit, exc.actual) == (10, 11)
    assert str(exc) == "Task list has 11 tasks, exceeding the limit of 10"


def test_invalid_transition_message():
    exc = InvalidTransitionError("A", "completed", "cancelled")
    assert exc.task_id == "A"
    assert str(exc) == "Invalid status transition for task A: completed -> cancelled"


def test_dependency_validation_carries_result():
    result = ValidationResult(errors=["first", "second"])
    exc = DependencyValidationError("A", result)
    assert exc.result is result
    assert str(exc) == "Dependencies for task A rejected: first; second"
