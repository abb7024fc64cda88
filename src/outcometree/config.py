from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from outcometree.debug import DebugChannels
from outcometree.render.renderer import RenderOptions

ENV_DEBUG = "OUTCOMETREE_DEBUG"
ENV_DEBUG_DEPTH = "OUTCOMETREE_DEBUG_DEPTH"
ENV_COLOR = "OUTCOMETREE_COLOR"

_FALSEY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class OutcomeTreeConfig:
    debug_namespaces: tuple[str, ...] = ()
    debug_depth: int = 2
    child_depth: int = 1
    detail_depth: int = 4
    error_depth: int = 4
    color: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> OutcomeTreeConfig:
        """Build a config from ``OUTCOMETREE_*`` environment variables."""
        env = os.environ if environ is None else environ
        namespaces = tuple(
            ns.strip() for ns in env.get(ENV_DEBUG, "").split(",") if ns.strip()
        )
        try:
            debug_depth = int(env.get(ENV_DEBUG_DEPTH, "2"))
        except ValueError:
            debug_depth = 2
        color = env.get(ENV_COLOR, "1").strip().lower() not in _FALSEY
        return cls(debug_namespaces=namespaces, debug_depth=debug_depth, color=color)

    def render_options(self) -> RenderOptions:
        return RenderOptions(
            child_depth=self.child_depth,
            detail_depth=self.detail_depth,
            error_depth=self.error_depth,
            color=self.color,
        )

    def debug_channels(self) -> DebugChannels:
        return DebugChannels(self.debug_namespaces, depth=self.debug_depth)
