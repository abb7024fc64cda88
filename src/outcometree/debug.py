"""Namespaced, opt-in debug output and the two outcome sinks.

Namespaces are ``:``-separated paths such as ``OUTCOME:ACTION`` or
``UTILITY:git:commit``. Enabling a namespace enables everything below it.
"""

from __future__ import annotations

import functools
import logging
import pprint
from collections.abc import Iterable
from typing import Any, Callable

import click

from outcometree.model.outcome import OutcomeNode
from outcometree.render.renderer import RenderOptions, render

Sink = Callable[[str], None]

OUTCOME_NAMESPACE = "OUTCOME"
LOGGER_PREFIX = "outcometree.debug"


def _normalize(namespace: str) -> str:
    return namespace.strip().strip(":")


class DebugChannels:
    """Set of enabled debug namespaces plus the sink they write to.

    Passed explicitly to whatever emits debug output; there is no global
    registry.
    """

    def __init__(
        self,
        namespaces: Iterable[str] = (),
        *,
        depth: int = 2,
        sink: Sink | None = None,
    ) -> None:
        self._enabled: dict[str, bool] = {}
        self.depth = depth
        self._sink: Sink = sink or functools.partial(click.echo, err=True)
        self.enable(namespaces)

    @property
    def enabled_namespaces(self) -> list[str]:
        return [ns for ns, on in self._enabled.items() if on]

    def enable(self, namespaces: Iterable[str]) -> None:
        for namespace in namespaces:
            if _normalize(namespace):
                self._enabled[_normalize(namespace)] = True

    def disable(self, namespaces: Iterable[str]) -> None:
        for namespace in namespaces:
            if _normalize(namespace):
                self._enabled[_normalize(namespace)] = False

    def is_enabled(self, namespace: str) -> bool:
        """True if *namespace* or any of its parent namespaces is enabled."""
        groups = _normalize(namespace).split(":")
        for i in range(1, len(groups) + 1):
            if self._enabled.get(":".join(groups[:i])):
                return True
        return False

    # --- gated output ---------------------------------------------------------

    def _emit(self, namespace: str, text: str) -> None:
        namespace = _normalize(namespace)
        logging.getLogger(f"{LOGGER_PREFIX}.{namespace.replace(':', '.')}").debug("%s", text)
        self._sink(f"[{namespace}] {text}")

    def message(self, namespace: str, text: str) -> None:
        if self.is_enabled(namespace):
            self._emit(namespace, text)

    def obj(self, namespace: str, value: Any, lead: str = "") -> None:
        if self.is_enabled(namespace):
            body = pprint.pformat(value, depth=max(self.depth, 1), sort_dicts=False)
            self._emit(namespace, f"{lead}\n{body}")


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------


def debug_result(
    node: OutcomeNode,
    channels: DebugChannels,
    label: str = "",
    namespace: str | None = None,
    options: RenderOptions | None = None,
) -> None:
    """Render *node* to the debug channel, if its namespace is enabled.

    The namespace defaults to ``OUTCOME:<KIND>``.
    """
    namespace = namespace or f"{OUTCOME_NAMESPACE}:{node.kind.value}"
    if channels.is_enabled(namespace):
        channels.message(namespace, render(node, options, context=label))


def display_result(
    node: OutcomeNode,
    options: RenderOptions | None = None,
    context: str = "",
    echo: Sink = click.echo,
) -> None:
    """Render *node* and print it unconditionally."""
    echo(render(node, options, context=context))
