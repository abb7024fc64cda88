"""Error types and error coercion for outcome trees.

Two families live here. ``OutcomeTreeError`` and its subclasses signal
programming mistakes made against the API (bad arguments, wrong types).
``OutcomeError`` is the structured error record attached to a failed or
errored outcome: it carries a name, a message, a causal chain and a trail
of breadcrumbs added by every outcome the error passed through.
"""

from __future__ import annotations

from typing import Any


class OutcomeTreeError(Exception):
    """Base error for misuse of the outcometree API."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidArgumentError(OutcomeTreeError):
    """An argument had an acceptable type but an unacceptable value."""


class TypeMismatchError(OutcomeTreeError):
    """An argument was not of the expected type."""

    def __init__(
        self,
        message: str,
        *,
        data: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.data = data or {}


# ---------------------------------------------------------------------------
# Structured error record
# ---------------------------------------------------------------------------

TRAIL_INDENT = "    "


class OutcomeError(Exception):
    """Structured error attached to an outcome.

    Attributes:
        message: Human-readable description.
        name: Short identifier, e.g. ``FAILED_ACTION`` or
            ``UNEXPECTED_ERROR (ValueError)``.
        cause: The error this one wraps, if any. Either another
            ``OutcomeError`` or a native exception.
        data: Caller-supplied structured data.
        trail: Breadcrumbs added as the error moved through outcomes,
            innermost first.
    """

    def __init__(
        self,
        message: str,
        *,
        name: str = "OutcomeError",
        cause: BaseException | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.name = name
        self.cause = cause
        self.data: dict[str, Any] = dict(data) if data else {}
        self.trail: list[str] = []
        if cause is not None:
            self.__cause__ = cause

    @property
    def stack(self) -> str:
        """The header line followed by every breadcrumb, one per line."""
        lines = [f"{self.name}: {self.message}"]
        lines.extend(f"{TRAIL_INDENT}{item}" for item in self.trail)
        return "\n".join(lines)

    def add_to_trail(self, item: str = "at UNSPECIFIED outcome from UNKNOWN") -> None:
        self.trail.append(item)

    def chain(self) -> list[BaseException]:
        """Return the causal chain, starting with this error.

        Follows ``OutcomeError.cause`` and, for native exceptions, the
        standard ``__cause__``/``__context__`` links.
        """
        links: list[BaseException] = []
        seen: set[int] = set()
        current: BaseException | None = self
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            links.append(current)
            if isinstance(current, OutcomeError):
                current = current.cause
            elif current.__cause__ is not None:
                current = current.__cause__
            elif not current.__suppress_context__:
                current = current.__context__
            else:
                current = None
        return links

    @property
    def root_cause(self) -> BaseException:
        return self.chain()[-1]

    # --- serialisation --------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        cause: dict[str, Any] | None = None
        if isinstance(self.cause, OutcomeError):
            cause = self.cause.to_dict()
        elif self.cause is not None:
            cause = {"name": type(self.cause).__name__, "message": str(self.cause)}
        return {
            "name": self.name,
            "message": self.message,
            "data": self.data,
            "trail": list(self.trail),
            "cause": cause,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OutcomeError:
        """Rebuild an error from :meth:`to_dict` output.

        Native causes come back as ``OutcomeError`` records carrying the
        original type name.
        """
        cause_data = data.get("cause")
        cause = cls.from_dict(cause_data) if cause_data else None
        err = cls(
            data.get("message", ""),
            name=data.get("name", "OutcomeError"),
            cause=cause,
            data=data.get("data") or {},
        )
        err.trail = list(data.get("trail", []))
        return err

    def __repr__(self) -> str:
        return f"OutcomeError(name={self.name!r}, message={self.message!r})"


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------


def describe_error(err: BaseException) -> str:
    """Return the display name of any error in a causal chain."""
    if isinstance(err, OutcomeError):
        return err.name
    return type(err).__name__


def coerce_error(value: Any, *, name: str | None = None) -> OutcomeError:
    """Normalise any raised or rejected value into an :class:`OutcomeError`.

    - an ``OutcomeError`` is returned unchanged;
    - an outcome node yields its own error, or a new one naming the node;
    - a native exception is kept as the ``cause`` of a new record;
    - a string becomes the message;
    - anything else is stored under ``data["raw"]``.
    """
    from outcometree.model.outcome import OutcomeNode

    if isinstance(value, OutcomeError):
        return value

    if isinstance(value, OutcomeNode):
        if value.err is not None:
            return value.err
        return OutcomeError(
            f"{value.kind.value} '{value.name}' ended with status {value.status.value}",
            name=name or value.kind.failure_name,
            data={"outcome": value.name},
        )

    if isinstance(value, BaseException):
        message = str(value) or type(value).__name__
        return OutcomeError(
            message,
            name=name or f"UNEXPECTED_ERROR ({type(value).__name__})",
            cause=value,
        )

    if isinstance(value, str):
        return OutcomeError(value, name=name or "OutcomeError")

    if value is None:
        return OutcomeError("An unknown error occurred", name=name or "UNKNOWN_ERROR")

    return OutcomeError(
        f"Unexpected {type(value).__name__} value: {value!r}",
        name=name or "UNKNOWN_ERROR",
        data={"raw": value},
    )
