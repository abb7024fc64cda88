"""Text rendering of outcome trees for terminals and debug output."""

from __future__ import annotations

import pprint
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

import click

from outcometree.model.errors import OutcomeError
from outcometree.model.outcome import OutcomeNode
from outcometree.model.status import OutcomeKind, OutcomeStatus


@dataclass(frozen=True)
class RenderOptions:
    """Colors and inspection depths used by :func:`render`.

    Attributes:
        child_depth: Levels of descendants listed below the node.
        detail_depth: Nesting depth shown for the detail payload.
        error_depth: Nesting depth shown for error data.
        color: Emit ANSI styling. ``click.echo`` strips it when the
            output is not a terminal.
    """

    header_color: str = "yellow"
    label_color: str = "blue"
    error_label_color: str = "red"
    value_color: str | None = None
    child_depth: int = 1
    detail_depth: int = 4
    error_depth: int = 4
    color: bool = True


KindRenderer = Callable[[OutcomeNode, RenderOptions], list[str]]

_KIND_RENDERERS: dict[OutcomeKind, KindRenderer] = {}

INDENT = "  "


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _style(text: str, fg: str | None, options: RenderOptions, bold: bool = False) -> str:
    if not options.color or (fg is None and not bold):
        return text
    return click.style(text, fg=fg, bold=bold)


def _field(label: str, value: Any, options: RenderOptions, *, error: bool = False) -> str:
    color = options.error_label_color if error else options.label_color
    return f"{_style(f'{label}:', color, options)} {_style(str(value), options.value_color, options)}"


def _heading(label: str, options: RenderOptions) -> str:
    return _style(f"{label}:", options.label_color, options)


def _inspect(value: Any, depth: int) -> str:
    if depth <= 0:
        return "..."
    return pprint.pformat(value, depth=depth, width=88, sort_dicts=False)


def _timestamp(ms: int) -> str:
    if not ms:
        return "-"
    moment = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    return f"{moment.isoformat(timespec='milliseconds')} ({ms})"


def _indent_block(text: str, prefix: str) -> str:
    return "\n".join(prefix + line for line in text.splitlines())


def _summary_line(node: OutcomeNode) -> str:
    return f"{node.kind.value} '{node.name}' {node.status.value} ({node.duration_secs:.3f}s)"


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


def render_base(node: OutcomeNode, options: RenderOptions, context: str = "") -> list[str]:
    """Header, identity, status, timing and detail of *node*."""
    header = context or f"{node.kind.value}_OUTCOME"
    lines = [
        _style(f"{header}:", options.header_color, options, bold=True),
        _field("Kind", node.kind.value, options),
        _field("Name", node.name, options),
        _field("Status", node.status.value, options),
        _field("Start Time", _timestamp(node.start_time), options),
        _field("End Time", _timestamp(node.end_time), options),
        _field("Duration", f"{node.duration_secs:.3f} seconds", options),
        _field("Children", len(node.children), options),
    ]
    if node.detail:
        lines.append(_heading(f"Detail (depth={options.detail_depth})", options))
        lines.append(_indent_block(_inspect(node.detail, options.detail_depth), INDENT))
    return lines


def render_error(node: OutcomeNode, options: RenderOptions) -> list[str]:
    """Every link of the node's causal chain as a numbered, flat list."""
    if node.err is None:
        return []

    links = node.err.chain()
    total = len(links)
    lines: list[str] = []
    for number, link in enumerate(links, start=1):
        if isinstance(link, OutcomeError):
            name, message = link.name, link.message
        else:
            name, message = type(link).__name__, str(link)
        lines.append(_field(f"Error {number} of {total}", name, options, error=True))
        lines.append(INDENT + _field("Message", message, options, error=True))
        if isinstance(link, OutcomeError):
            if link.trail:
                lines.append(INDENT + _style("Trail:", options.error_label_color, options))
                lines.extend(f"{INDENT * 2}{item}" for item in link.trail)
            if link.data:
                lines.append(
                    INDENT
                    + _style(
                        f"Data (depth={options.error_depth}):",
                        options.error_label_color,
                        options,
                    )
                )
                lines.append(_indent_block(_inspect(link.data, options.error_depth), INDENT * 2))
    plural = "error" if total == 1 else "errors"
    lines.append(_style(f"End of error chain ({total} {plural})", options.error_label_color, options))
    return lines


def render_children(node: OutcomeNode, depth: int, indent: str = INDENT) -> list[str]:
    """Indented tree of descendants, *depth* levels deep."""
    lines: list[str] = []
    for child in node.children:
        lines.append(f"{indent}- {_summary_line(child)}")
        if not child.children:
            continue
        if depth > 1:
            lines.extend(render_children(child, depth - 1, indent + INDENT))
        else:
            lines.append(f"{indent}{INDENT}... {len(child.children)} more child outcome(s)")
    return lines


def render_any_detail(node: OutcomeNode, options: RenderOptions) -> list[str]:
    """Child listing used for every kind without a dedicated renderer."""
    if not node.children:
        return []
    lines = [_heading(f"Child Outcomes (depth={options.child_depth})", options)]
    if options.child_depth <= 0:
        lines.append(f"{INDENT}...")
    else:
        lines.extend(render_children(node, options.child_depth))
    return lines


def render_action_detail(node: OutcomeNode, options: RenderOptions) -> list[str]:
    """Actions list their steps with a per-status tally."""
    lines: list[str] = []
    if node.children:
        tally = Counter(child.status for child in node.children)
        parts = [
            f"{status.value}={tally[status]}"
            for status in OutcomeStatus
            if tally[status]
        ]
        lines.append(_field("Step Results", ", ".join(parts), options))
    lines.extend(render_any_detail(node, options))
    return lines


def register_kind_renderer(kind: OutcomeKind, renderer: KindRenderer) -> None:
    """Use *renderer* for the kind-specific block of nodes of *kind*."""
    _KIND_RENDERERS[kind] = renderer


def kind_renderer(kind: OutcomeKind) -> KindRenderer:
    return _KIND_RENDERERS.get(kind, render_any_detail)


register_kind_renderer(OutcomeKind.ACTION, render_action_detail)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def render(node: OutcomeNode, options: RenderOptions | None = None, context: str = "") -> str:
    """Render *node* and its descendants as terminal text.

    The output is meant for people; it is not a stable format.
    """
    options = options or RenderOptions()
    lines = render_base(node, options, context)
    lines.extend(render_error(node, options))
    lines.extend(kind_renderer(node.kind)(node, options))
    return "\n".join(lines) + "\n"


def to_dict(node: OutcomeNode, depth: int | None = None) -> dict[str, Any]:
    """Structured rendering of *node*, children limited to *depth* levels."""
    return node.to_dict(depth)
