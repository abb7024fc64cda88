"""Tests for outcometree.model.errors."""
from __future__ import annotations

from outcometree.model.errors import (
    InvalidArgumentError,
    OutcomeError,
    OutcomeTreeError,
    TypeMismatchError,
    coerce_error,
    describe_error,
)
from outcometree.model.outcome import OutcomeNode
from outcometree.model.status import OutcomeKind


# ---------------------------------------------------------------------------
# API misuse errors
# ---------------------------------------------------------------------------


class TestOutcomeTreeError:
    def test_hierarchy(self) -> None:
        assert issubclass(InvalidArgumentError, OutcomeTreeError)
        assert issubclass(TypeMismatchError, OutcomeTreeError)

    def test_cause(self) -> None:
        orig = KeyError("x")
        err = InvalidArgumentError("bad", cause=orig)
        assert str(err) == "bad"
        assert err.cause is orig

    def test_type_mismatch_data_default(self) -> None:
        assert TypeMismatchError("nope").data == {}


# ---------------------------------------------------------------------------
# OutcomeError
# ---------------------------------------------------------------------------


class TestOutcomeError:
    def test_fields(self) -> None:
        err = OutcomeError("boom", name="FAILED_ACTION", data={"k": 1})
        assert err.message == "boom"
        assert err.name == "FAILED_ACTION"
        assert err.data == {"k": 1}
        assert err.cause is None
        assert err.trail == []

    def test_cause_sets_dunder_cause(self) -> None:
        orig = ValueError("inner")
        err = OutcomeError("outer", cause=orig)
        assert err.__cause__ is orig

    def test_trail_and_stack(self) -> None:
        err = OutcomeError("boom", name="X")
        err.add_to_trail("at ACTION 'a'")
        err.add_to_trail()
        assert err.trail == ["at ACTION 'a'", "at UNSPECIFIED outcome from UNKNOWN"]
        assert err.stack.splitlines()[0] == "X: boom"
        assert err.stack.splitlines()[1].strip() == "at ACTION 'a'"

    def test_chain_follows_outcome_and_native_causes(self) -> None:
        try:
            try:
                raise KeyError("deepest")
            except KeyError as exc:
                raise ValueError("native") from exc
        except ValueError as exc:
            native = exc
        inner = OutcomeError("inner", cause=native)
        outer = OutcomeError("outer", cause=inner)
        chain = outer.chain()
        assert chain[:3] == [outer, inner, native]
        assert isinstance(chain[3], KeyError)
        assert outer.root_cause is chain[3]

    def test_chain_stops_on_cycle(self) -> None:
        a = OutcomeError("a")
        b = OutcomeError("b", cause=a)
        a.cause = b
        assert a.chain() == [a, b]

    def test_dict_round_trip(self) -> None:
        inner = OutcomeError("inner", name="INNER", cause=RuntimeError("root"))
        inner.add_to_trail("at ACTION 'x'")
        outer = OutcomeError("outer", name="OUTER", cause=inner, data={"n": 2})
        rebuilt = OutcomeError.from_dict(outer.to_dict())
        assert rebuilt.name == "OUTER"
        assert rebuilt.data == {"n": 2}
        assert isinstance(rebuilt.cause, OutcomeError)
        assert rebuilt.cause.trail == ["at ACTION 'x'"]
        assert rebuilt.cause.cause.name == "RuntimeError"
        assert rebuilt.cause.cause.message == "root"


# ---------------------------------------------------------------------------
# coerce_error
# ---------------------------------------------------------------------------


class TestCoerceError:
    def test_outcome_error_unchanged(self) -> None:
        err = OutcomeError("x")
        assert coerce_error(err) is err

    def test_native_exception_becomes_cause(self) -> None:
        orig = ValueError("disk full")
        err = coerce_error(orig)
        assert err.message == "disk full"
        assert err.name == "UNEXPECTED_ERROR (ValueError)"
        assert err.cause is orig

    def test_empty_exception_message_uses_type(self) -> None:
        assert coerce_error(RuntimeError()).message == "RuntimeError"

    def test_string(self) -> None:
        err = coerce_error("plain string")
        assert err.message == "plain string"
        assert err.cause is None

    def test_none(self) -> None:
        err = coerce_error(None)
        assert err.name == "UNKNOWN_ERROR"

    def test_other_value_kept_raw(self) -> None:
        err = coerce_error(42)
        assert err.data == {"raw": 42}

    def test_name_override(self) -> None:
        assert coerce_error("x", name="CUSTOM").name == "CUSTOM"

    def test_node_with_error_yields_its_error(self) -> None:
        node = OutcomeNode("step", OutcomeKind.ACTION)
        node.failure(ValueError("bad"))
        assert coerce_error(node) is node.err

    def test_node_without_error_is_named_after_kind(self) -> None:
        node = OutcomeNode("step", OutcomeKind.ACTION)
        err = coerce_error(node)
        assert err.name == "FAILED_ACTION"
        assert "step" in err.message

    def test_describe_error(self) -> None:
        assert describe_error(OutcomeError("x", name="N")) == "N"
        assert describe_error(KeyError("k")) == "KeyError"
