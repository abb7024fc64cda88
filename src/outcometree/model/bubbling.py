"""Bubbling rules: how a child's status propagates into its parent."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from outcometree.model.errors import OutcomeError
from outcometree.model.status import OutcomeStatus

if TYPE_CHECKING:
    from outcometree.model.outcome import OutcomeNode


class BubbleAction(Enum):
    """What attaching a child does to its parent."""

    NONE = "none"
    FAIL = "fail"  # parent.failure(...)
    THROW = "throw"  # parent.throw(...)
    WARN = "warn"  # parent degraded to WARNING, still running
    SKIP = "skip"  # parent already ERROR


def decide(parent: OutcomeNode, child: OutcomeNode) -> BubbleAction:
    """Pick the bubbling action for attaching *child* to *parent*.

    Rules, evaluated in order:
    1. a parent already in ERROR is never revised;
    2. a child FAILURE the parent does not treat as an error fails the
       parent (``bubble_failure``) or degrades it to WARNING;
    3. a child ERROR, or a FAILURE treated as one, throws the parent
       (``bubble_error``) or degrades it to WARNING;
    4. every other child status leaves the parent alone.
    """
    if parent.status is OutcomeStatus.ERROR:
        return BubbleAction.SKIP

    if child.status is OutcomeStatus.FAILURE and not parent.failure_is_error:
        return BubbleAction.FAIL if parent.bubble_failure else BubbleAction.WARN

    if child.status is OutcomeStatus.ERROR or (
        child.status is OutcomeStatus.FAILURE and parent.failure_is_error
    ):
        return BubbleAction.THROW if parent.bubble_error else BubbleAction.WARN

    return BubbleAction.NONE


def bubbled_error(parent: OutcomeNode, child: OutcomeNode) -> OutcomeError:
    """Build the parent-level error recording that *child* brought it down."""
    verb = "errored" if child.status is OutcomeStatus.ERROR else "failed"
    message = (
        f"{parent.kind.value} '{parent.name}' stopped because "
        f"child {child.kind.value} '{child.name}' {verb}"
    )
    if child.err is not None:
        message += f": {child.err.message}"
    return OutcomeError(
        message,
        name=parent.kind.failure_name,
        cause=child.err,
        data={
            "parent": parent.name,
            "child": child.name,
            "child_kind": child.kind.value,
            "child_status": child.status.value,
        },
    )
