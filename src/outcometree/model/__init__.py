"""Outcome model layer -- public type re-exports."""

from outcometree.model.bubbling import BubbleAction, bubbled_error, decide
from outcometree.model.errors import (
    InvalidArgumentError,
    OutcomeError,
    OutcomeTreeError,
    TypeMismatchError,
    coerce_error,
)
from outcometree.model.outcome import OutcomeNode, now_ms, wrap, wrap_rejected
from outcometree.model.status import OutcomeKind, OutcomeStatus

__all__ = [
    # status
    "OutcomeStatus",
    "OutcomeKind",
    # errors
    "OutcomeTreeError",
    "InvalidArgumentError",
    "TypeMismatchError",
    "OutcomeError",
    "coerce_error",
    # outcome
    "OutcomeNode",
    "now_ms",
    "wrap",
    "wrap_rejected",
    # bubbling
    "BubbleAction",
    "decide",
    "bubbled_error",
]
