"""Tests for child-to-parent status bubbling."""
from __future__ import annotations

import pytest

from outcometree.model.bubbling import BubbleAction, bubbled_error, decide
from outcometree.model.outcome import OutcomeNode
from outcometree.model.status import OutcomeKind, OutcomeStatus


def _failed(name: str = "child", source: object = None) -> OutcomeNode:
    return OutcomeNode(name, OutcomeKind.ACTION).failure(source)


def _errored(name: str = "child", source: object = None) -> OutcomeNode:
    return OutcomeNode(name, OutcomeKind.ACTION).error(source)


# ---------------------------------------------------------------------------
# decide()
# ---------------------------------------------------------------------------


class TestDecide:
    def test_success_child(self) -> None:
        parent = OutcomeNode("p")
        assert decide(parent, OutcomeNode("c").success()) is BubbleAction.NONE

    def test_running_child(self) -> None:
        assert decide(OutcomeNode("p"), OutcomeNode("c")) is BubbleAction.NONE

    def test_warning_child(self) -> None:
        assert decide(OutcomeNode("p"), OutcomeNode("c").warning()) is BubbleAction.NONE

    def test_failure_child(self) -> None:
        assert decide(OutcomeNode("p"), _failed()) is BubbleAction.FAIL

    def test_failure_child_suppressed(self) -> None:
        parent = OutcomeNode("p", bubble_failure=False)
        assert decide(parent, _failed()) is BubbleAction.WARN

    def test_failure_as_error(self) -> None:
        parent = OutcomeNode("p", failure_is_error=True)
        assert decide(parent, _failed()) is BubbleAction.THROW

    def test_failure_as_error_suppressed(self) -> None:
        parent = OutcomeNode("p", failure_is_error=True, bubble_error=False)
        assert decide(parent, _failed()) is BubbleAction.WARN

    def test_error_child(self) -> None:
        assert decide(OutcomeNode("p"), _errored()) is BubbleAction.THROW

    def test_error_child_suppressed(self) -> None:
        parent = OutcomeNode("p", bubble_error=False)
        assert decide(parent, _errored()) is BubbleAction.WARN

    def test_parent_already_error(self) -> None:
        parent = OutcomeNode("p").error()
        assert decide(parent, _errored()) is BubbleAction.SKIP


class TestBubbledError:
    def test_message_and_cause(self) -> None:
        parent = OutcomeNode("root", OutcomeKind.COMMAND)
        child = _failed("stepB", ValueError("disk full"))
        err = bubbled_error(parent, child)
        assert err.name == "FAILED_COMMAND"
        assert "stepB" in err.message
        assert "failed" in err.message
        assert err.message.endswith("disk full")
        assert err.cause is child.err
        assert err.data["child_status"] == "FAILURE"

    def test_errored_verb(self) -> None:
        err = bubbled_error(OutcomeNode("p"), _errored("c"))
        assert "errored" in err.message


# ---------------------------------------------------------------------------
# add_child wiring
# ---------------------------------------------------------------------------


class TestBubbleFailure:
    def test_parent_fails(self) -> None:
        parent = OutcomeNode("P")
        child = _failed("C", "broken")
        parent.add_child(child)
        assert parent.status is OutcomeStatus.FAILURE
        assert parent.finished
        assert parent.err is not None
        assert child.err in parent.err.chain()

    def test_suppressed_parent_warns_and_keeps_running(self) -> None:
        parent = OutcomeNode("P", bubble_failure=False)
        parent.add_child(_failed("C"))
        assert parent.status is OutcomeStatus.WARNING
        assert parent.end_time == 0
        assert parent.err is None

    def test_warning_does_not_lower_failure(self) -> None:
        parent = OutcomeNode("P", bubble_error=False)
        parent.add_child(_failed("C1"))
        parent.add_child(_errored("C2"))
        assert parent.status is OutcomeStatus.FAILURE

    def test_failure_is_error_throws(self) -> None:
        parent = OutcomeNode("P", failure_is_error=True)
        with pytest.raises(OutcomeNode) as excinfo:
            parent.add_child(_failed("C"))
        assert excinfo.value is parent
        assert parent.status is OutcomeStatus.ERROR


class TestErrorEscalation:
    def test_throws_parent_itself(self) -> None:
        parent = OutcomeNode("P")
        child = _errored("C", RuntimeError("boom"))
        with pytest.raises(OutcomeNode) as excinfo:
            parent.add_child(child)
        assert excinfo.value is parent
        assert excinfo.value.status is OutcomeStatus.ERROR
        assert parent.children == [child]
        assert parent.err is not None
        assert parent.err.cause is child.err

    def test_suppressed_error_warns(self) -> None:
        parent = OutcomeNode("P", bubble_error=False)
        parent.add_child(_errored("C"))
        assert parent.status is OutcomeStatus.WARNING
        assert not parent.finished

    def test_error_parent_not_revised(self) -> None:
        parent = OutcomeNode("P", bubble_error=False)
        parent.error("own problem")
        parent.add_child(_errored("C"))
        assert parent.status is OutcomeStatus.ERROR
        assert parent.err is not None
        assert parent.err.message == "own problem"

    def test_error_propagates_through_levels(self) -> None:
        root = OutcomeNode("root", OutcomeKind.COMMAND)
        action = OutcomeNode("action", OutcomeKind.ACTION)
        with pytest.raises(OutcomeNode) as inner:
            action.add_child(_errored("util", KeyError("token")))
        with pytest.raises(OutcomeNode) as outer:
            root.add_child(inner.value)
        assert outer.value is root
        assert root.err is not None
        chain = root.err.chain()
        assert any(isinstance(link, KeyError) for link in chain)


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_end_to_end(self) -> None:
        root = OutcomeNode("root", OutcomeKind.COMMAND)
        step_a = OutcomeNode("stepA", OutcomeKind.ACTION).success()
        root.add_child(step_a)
        assert root.status is OutcomeStatus.WAITING

        step_b = OutcomeNode("stepB", OutcomeKind.ACTION).failure(ValueError("disk full"))
        root.add_child(step_b)

        assert root.status is OutcomeStatus.FAILURE
        assert root.err is not None
        assert "stepB" in root.err.message
        messages = [str(getattr(link, "message", link)) for link in root.err.chain()]
        assert any("disk full" in m for m in messages)
        assert root.children == [step_a, step_b]

    def test_ordering(self) -> None:
        parent = OutcomeNode("parent")
        c1 = OutcomeNode("C1").success()
        c2 = _errored("C2")
        c3 = OutcomeNode("C3").success()

        attached = []
        with pytest.raises(OutcomeNode):
            for child in (c1, c2, c3):
                attached.append(child)
                parent.add_child(child)

        assert attached == [c1, c2]
        assert len(parent.children) == 2
        assert c3 not in parent.children
