"""Outcome status and kind enumerations."""

from __future__ import annotations

from enum import Enum


class OutcomeStatus(Enum):
    """Lifecycle state of an outcome, ordered by severity for merging.

    The declaration order is the priority order, lowest first.
    """

    INITIALIZED = "INITIALIZED"
    WAITING = "WAITING"
    UNKNOWN = "UNKNOWN"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    FAILURE = "FAILURE"
    ERROR = "ERROR"

    @property
    def priority(self) -> int:
        return _PRIORITY[self]

    @property
    def is_pending(self) -> bool:
        """True while the unit of work has not reported a result."""
        return self in (OutcomeStatus.INITIALIZED, OutcomeStatus.WAITING)

    @property
    def is_terminal(self) -> bool:
        return not self.is_pending

    @property
    def is_problem(self) -> bool:
        """True for statuses surfaced in a warning summary."""
        return self in (OutcomeStatus.WARNING, OutcomeStatus.FAILURE, OutcomeStatus.ERROR)


_PRIORITY: dict[OutcomeStatus, int] = {status: i for i, status in enumerate(OutcomeStatus)}


class OutcomeKind(Enum):
    """Category of the unit of work that produced an outcome."""

    COMMAND = "COMMAND"
    ACTION = "ACTION"
    ENGINE = "ENGINE"
    EXECUTOR = "EXECUTOR"
    RECIPE = "RECIPE"
    INQUIRER = "INQUIRER"
    TASK_RUNNER = "TASK_RUNNER"
    UTILITY = "UTILITY"
    FUNCTION = "FUNCTION"
    GENERATOR = "GENERATOR"
    UNKNOWN = "UNKNOWN"

    @property
    def failure_name(self) -> str:
        """Error name used when an outcome of this kind fails."""
        return f"FAILED_{self.value}"
