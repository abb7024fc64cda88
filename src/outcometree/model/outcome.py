"""Outcome node: status, timing, detail and children of one unit of work.

An ``OutcomeNode`` is created when a unit of work starts, finalized with one
of ``success``/``warning``/``failure``/``error``/``unknown`` when it ends,
and collects the outcomes of any sub-operations through ``add_child``.
Attaching a failed or errored child bubbles that status into the parent
according to the parent's policy flags.

Nodes are plain in-memory objects without locking. Each node must have a
single writer: when sub-operations run concurrently, the orchestrating code
waits for them and attaches their outcomes itself, one at a time.

``OutcomeNode`` is an ``Exception`` so that ``throw()`` can raise the node
itself; whoever catches it gets the whole tree.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any, NoReturn

from outcometree.model import bubbling
from outcometree.model.errors import (
    InvalidArgumentError,
    OutcomeError,
    TypeMismatchError,
    coerce_error,
    describe_error,
)
from outcometree.model.status import OutcomeKind, OutcomeStatus

logger = logging.getLogger(__name__)

UNKNOWN_OUTCOME_NAME = "UNKNOWN OUTCOME"

_PRIMITIVES = (str, bytes, int, float, complex, bool)


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


class OutcomeNode(Exception):
    """Result record for one unit of work, with child outcomes.

    Args:
        name: Human label for the unit of work.
        kind: Category of the unit of work.
        start_now: Start the timer immediately (status becomes WAITING).
        bubble_error: Raise this node when an erroring child is attached.
        bubble_failure: Fail this node when a failing child is attached.
        failure_is_error: Treat a failing child like an erroring one.
            Off by default, so a failing child fails this node instead of
            raising it; pass True for eager escalation.
        detail: Initial detail payload.
    """

    def __init__(
        self,
        name: str,
        kind: OutcomeKind = OutcomeKind.UNKNOWN,
        *,
        start_now: bool = True,
        bubble_error: bool = True,
        bubble_failure: bool = True,
        failure_is_error: bool = False,
        detail: Any = None,
    ) -> None:
        super().__init__(name)
        self._name = name
        self._kind = kind
        self._bubble_error = bool(bubble_error)
        self._bubble_failure = bool(bubble_failure)
        self._failure_is_error = bool(failure_is_error)
        self._status = OutcomeStatus.INITIALIZED
        self._start_time = 0
        self._end_time = 0
        self.detail: dict[str, Any] | Any = {}
        self.err: OutcomeError | None = None
        self.children: list[OutcomeNode] = []
        self.set_detail(detail)
        if start_now:
            self.start()

    # --- read-only attributes -------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def kind(self) -> OutcomeKind:
        return self._kind

    @property
    def status(self) -> OutcomeStatus:
        return self._status

    @property
    def bubble_error(self) -> bool:
        return self._bubble_error

    @property
    def bubble_failure(self) -> bool:
        return self._bubble_failure

    @property
    def failure_is_error(self) -> bool:
        return self._failure_is_error

    @property
    def start_time(self) -> int:
        return self._start_time

    @property
    def end_time(self) -> int:
        return self._end_time

    @property
    def started(self) -> bool:
        return self._start_time != 0

    @property
    def finished(self) -> bool:
        return self._end_time != 0

    @property
    def duration(self) -> int:
        """Elapsed milliseconds; still counting while the node is running."""
        if self._start_time == 0:
            return 0
        if self._end_time != 0:
            return self._end_time - self._start_time
        return now_ms() - self._start_time

    @property
    def duration_secs(self) -> float:
        return self.duration / 1000

    @property
    def duration_string(self) -> str:
        seconds = int(self.duration_secs)
        if seconds < 60:
            return f"{seconds}s"
        return f"{seconds // 60}m {seconds % 60}s"

    # --- state machine --------------------------------------------------------

    def start(self) -> OutcomeNode:
        """Start the timer. Calling it again has no effect."""
        if self._start_time == 0:
            self._start_time = now_ms()
        if self._status is OutcomeStatus.INITIALIZED:
            self._status = OutcomeStatus.WAITING
        return self

    def finish(self, final_status: OutcomeStatus = OutcomeStatus.UNKNOWN) -> OutcomeStatus:
        """Stop the timer and move to *final_status* if it outranks the current one.

        ERROR always wins. The end time is recorded on the first call only.
        Returns the status the node ends up with.
        """
        if final_status.is_pending:
            raise InvalidArgumentError(
                f"finish() does not accept {final_status.value} as a final status"
            )

        self.start()

        if (
            final_status is OutcomeStatus.ERROR
            or final_status.priority > self._status.priority
        ):
            self._status = final_status

        if self._end_time == 0:
            self._end_time = now_ms()

        logger.debug(
            "%s '%s' finished as %s (requested %s) after %dms",
            self._kind.value,
            self._name,
            self._status.value,
            final_status.value,
            self.duration,
        )
        return self._status

    def success(self, detail: Any = None) -> OutcomeNode:
        self.finish(OutcomeStatus.SUCCESS)
        self.set_detail(detail)
        return self

    def warning(self, detail: Any = None) -> OutcomeNode:
        self.finish(OutcomeStatus.WARNING)
        self.set_detail(detail)
        return self

    def unknown(self, detail: Any = None) -> OutcomeNode:
        self.finish(OutcomeStatus.UNKNOWN)
        self.set_detail(detail)
        return self

    def failure(self, source: Any = None, detail: Any = None) -> OutcomeNode:
        """Finish as FAILURE, recording *source* as this node's error.

        With no *source*, an error naming this node is synthesized so
        that every failure renders the same way.
        """
        if source is None:
            source = OutcomeError(
                f"{self._kind.value} '{self._name}' reported a failure",
                name=self._kind.failure_name,
            )
        self._record_error(source, OutcomeStatus.FAILURE)
        self.set_detail(detail)
        self.finish(OutcomeStatus.FAILURE)
        return self

    def error(self, source: Any = None, detail: Any = None) -> OutcomeNode:
        """Finish as ERROR, recording *source* as this node's error."""
        if source is None:
            source = OutcomeError(
                f"An unknown error occurred while building the outcome of '{self._name}'",
                name=f"UNKNOWN_ERROR ({self._kind.value})",
            )
        self._record_error(source, OutcomeStatus.ERROR)
        self.set_detail(detail)
        self.finish(OutcomeStatus.ERROR)
        return self

    def throw(self, source: Any = None) -> NoReturn:
        """Finish as ERROR and raise this node."""
        self.error(source)
        raise self

    def _record_error(self, source: Any, target: OutcomeStatus) -> None:
        err = coerce_error(source)
        cause = err.cause if err.cause is not None else err
        err.add_to_trail(
            f"at {self._kind.value} '{self._name}' after {self.duration}ms"
            f" (cause: {describe_error(cause)})"
        )
        if self.err is None or target.priority >= self._status.priority:
            self.err = err

    def set_detail(self, value: Any) -> Any:
        """Store *value* as the detail payload.

        ``None`` leaves the detail unchanged. Primitive values are wrapped
        as ``{"raw_result": value}``.
        """
        if value is None:
            return self.detail
        if isinstance(value, Mapping):
            self.detail = dict(value)
        elif isinstance(value, _PRIMITIVES):
            self.detail = {"raw_result": value}
        else:
            self.detail = value
        return self.detail

    # --- tree composition -----------------------------------------------------

    def add_child(self, child: Any, require_valid_child: bool = True) -> OutcomeNode:
        """Attach *child* and bubble its status into this node.

        Raises this node when the child errored and ``bubble_error`` is set.
        Returns this node for chaining otherwise.
        """
        if require_valid_child:
            OutcomeNode.is_valid(child)

        if not isinstance(child, OutcomeNode):
            return self.add_child(wrap(child, OutcomeKind.UNKNOWN, UNKNOWN_OUTCOME_NAME))

        self.start()
        self.children.append(child)

        action = bubbling.decide(self, child)
        if action is not bubbling.BubbleAction.NONE:
            logger.debug(
                "%s '%s' bubbling %s from child %s '%s': %s",
                self._kind.value,
                self._name,
                child.status.value,
                child.kind.value,
                child.name,
                action.value,
            )

        if action is bubbling.BubbleAction.FAIL:
            self.failure(bubbling.bubbled_error(self, child))
        elif action is bubbling.BubbleAction.THROW:
            self.throw(bubbling.bubbled_error(self, child))
        elif action is bubbling.BubbleAction.WARN:
            # Degrade without finishing; never lower an existing FAILURE.
            if self._status.priority < OutcomeStatus.WARNING.priority:
                self._status = OutcomeStatus.WARNING

        return self

    def add_resolved_child(
        self,
        value: Any,
        kind: OutcomeKind = OutcomeKind.UNKNOWN,
        name: str = UNKNOWN_OUTCOME_NAME,
    ) -> OutcomeNode:
        """Wrap whatever a sub-operation returned and attach it."""
        return self.add_child(wrap(value, kind, name))

    def add_rejected_child(
        self,
        value: Any,
        kind: OutcomeKind = OutcomeKind.UNKNOWN,
        name: str = UNKNOWN_OUTCOME_NAME,
    ) -> OutcomeNode:
        """Wrap whatever a sub-operation raised and attach it."""
        return self.add_child(wrap_rejected(value, kind, name))

    def iter_tree(self):
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.iter_tree()

    # --- validation -----------------------------------------------------------

    @staticmethod
    def is_valid(candidate: Any) -> None:
        """Raise :class:`TypeMismatchError` unless *candidate* is an outcome node."""
        if isinstance(candidate, OutcomeNode):
            return
        raise TypeMismatchError(
            f"Expected an OutcomeNode but got '{type(candidate).__name__}'",
            data={"unknown_object": candidate},
        )

    @staticmethod
    def validate(
        candidate: Any,
        expected_kind: OutcomeKind | None = None,
        expected_status: OutcomeStatus | None = None,
    ) -> bool:
        """Return True if *candidate* is a node matching the given kind and status."""
        if not isinstance(candidate, OutcomeNode):
            return False
        if expected_kind is not None and candidate.kind is not expected_kind:
            return False
        if expected_status is not None and candidate.status is not expected_status:
            return False
        return True

    # --- serialisation --------------------------------------------------------

    def to_dict(self, depth: int | None = None) -> dict[str, Any]:
        """Structured form of this node; children below *depth* are omitted."""
        data: dict[str, Any] = {
            "name": self._name,
            "kind": self._kind.value,
            "status": self._status.value,
            "start_time": self._start_time,
            "end_time": self._end_time,
            "duration": self.duration,
            "bubble_error": self._bubble_error,
            "bubble_failure": self._bubble_failure,
            "failure_is_error": self._failure_is_error,
            "detail": self.detail,
            "error": self.err.to_dict() if self.err is not None else None,
            "child_count": len(self.children),
        }
        if depth is None or depth > 0:
            next_depth = None if depth is None else depth - 1
            data["children"] = [child.to_dict(next_depth) for child in self.children]
        else:
            data["children"] = []
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OutcomeNode:
        """Rebuild a node tree from :meth:`to_dict` output, without bubbling."""
        node = cls(
            data["name"],
            OutcomeKind(data.get("kind", OutcomeKind.UNKNOWN.value)),
            start_now=False,
            bubble_error=data.get("bubble_error", True),
            bubble_failure=data.get("bubble_failure", True),
            failure_is_error=data.get("failure_is_error", False),
        )
        node._status = OutcomeStatus(data.get("status", OutcomeStatus.INITIALIZED.value))
        node._start_time = int(data.get("start_time", 0))
        node._end_time = int(data.get("end_time", 0))
        node.detail = data.get("detail") or {}
        if data.get("error"):
            node.err = OutcomeError.from_dict(data["error"])
        node.children = [cls.from_dict(child) for child in data.get("children", [])]
        return node

    # --- dunder helpers -------------------------------------------------------

    def __str__(self) -> str:
        text = f"{self._kind.value} '{self._name}' {self._status.value}"
        if self.err is not None:
            text += f": {self.err.message}"
        return text

    def __repr__(self) -> str:
        return (
            f"OutcomeNode(name={self._name!r}, kind={self._kind.value}, "
            f"status={self._status.value}, children={len(self.children)})"
        )


# ---------------------------------------------------------------------------
# Wrapping
# ---------------------------------------------------------------------------


def wrap(
    value: Any,
    kind: OutcomeKind = OutcomeKind.UNKNOWN,
    name: str = UNKNOWN_OUTCOME_NAME,
    **options: Any,
) -> OutcomeNode:
    """Turn any value into an outcome node.

    Nodes are returned unchanged. Errors produce an ERROR node. Any other
    value becomes the detail of an UNKNOWN node, since whether it means
    success or failure cannot be told.
    """
    if isinstance(value, OutcomeNode):
        return value

    node = OutcomeNode(name, kind, **options)
    if isinstance(value, BaseException):
        node.error(value)
    else:
        node.unknown(value)
    return node


def wrap_rejected(
    value: Any,
    kind: OutcomeKind = OutcomeKind.UNKNOWN,
    name: str = UNKNOWN_OUTCOME_NAME,
    **options: Any,
) -> OutcomeNode:
    """Wrap a value a failed operation raised or rejected with.

    The value is always coerced into an error first, so the node never
    ends up UNKNOWN or SUCCESS.
    """
    if isinstance(value, OutcomeNode):
        return value
    return wrap(coerce_error(value), kind, name, **options)
