"""Outcometree: hierarchical outcome tracking with bubbling and rendering."""
from __future__ import annotations

from outcometree.config import OutcomeTreeConfig
from outcometree.debug import DebugChannels, debug_result, display_result
from outcometree.model import (
    OutcomeError,
    OutcomeKind,
    OutcomeNode,
    OutcomeStatus,
    coerce_error,
    wrap,
    wrap_rejected,
)
from outcometree.render import RenderOptions, render

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "OutcomeTreeConfig",
    "DebugChannels",
    "debug_result",
    "display_result",
    "OutcomeError",
    "OutcomeKind",
    "OutcomeNode",
    "OutcomeStatus",
    "coerce_error",
    "wrap",
    "wrap_rejected",
    "RenderOptions",
    "render",
]
