"""Rendering of outcome trees: text for terminals, dicts for tooling."""

from outcometree.render.renderer import (
    KindRenderer,
    RenderOptions,
    kind_renderer,
    register_kind_renderer,
    render,
    to_dict,
)

__all__ = [
    "RenderOptions",
    "KindRenderer",
    "render",
    "to_dict",
    "register_kind_renderer",
    "kind_renderer",
]
