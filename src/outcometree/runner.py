"""Helpers for the code that owns a root outcome.

``run_command`` is the top-level boundary of a command: it owns the root
outcome, renders it when something went wrong and maps it to an exit code.
``run_parallel`` fans work out to a thread pool and attaches the results to
a parent from the calling thread, one at a time.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

import click

from outcometree.config import OutcomeTreeConfig
from outcometree.debug import Sink, debug_result, display_result
from outcometree.model.outcome import OutcomeNode
from outcometree.model.status import OutcomeKind, OutcomeStatus

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1

CommandBody = Callable[[OutcomeNode], Any]


def collect_warnings(node: OutcomeNode) -> list[OutcomeNode]:
    """Every node in the tree whose status is WARNING, FAILURE or ERROR."""
    return [n for n in node.iter_tree() if n.status.is_problem]


def warning_summary(node: OutcomeNode) -> list[str]:
    lines = []
    for problem in collect_warnings(node):
        line = f"  - {problem.kind.value} '{problem.name}' {problem.status.value}"
        if problem.err is not None:
            line += f": {problem.err.message}"
        lines.append(line)
    return lines


def _attach_raised(root: OutcomeNode, raised: OutcomeNode) -> None:
    """Record an outcome raised out of a command body under its root.

    A node already somewhere in the root's tree is not attached again.
    """
    if not any(node is raised for node in root.iter_tree()):
        try:
            root.add_child(raised)
        except OutcomeNode as bubbled:
            if bubbled is not root:
                raise
    if root.status is not OutcomeStatus.ERROR:
        root.error(raised)


def run_command(
    name: str,
    body: CommandBody,
    *,
    config: OutcomeTreeConfig | None = None,
    echo: Sink = click.echo,
) -> int:
    """Run *body* under a COMMAND root outcome and return an exit code.

    - A body that leaves the root pending gets it finalized as SUCCESS.
    - An outcome raised out of the body (including the root itself after
      an ERROR bubbled up) is rendered and yields exit code 1.
    - Any other exception is recorded as the root's error, rendered, and
      yields exit code 1.
    - FAILURE or WARNING roots print a warning summary and exit with 0.
    """
    config = config or OutcomeTreeConfig()
    options = config.render_options()
    channels = config.debug_channels()
    root = OutcomeNode(name, OutcomeKind.COMMAND)

    try:
        body(root)
    except OutcomeNode as raised:
        if raised is not root:
            _attach_raised(root, raised)
        logger.info("command %s raised %s", name, root)
    except Exception as exc:
        logger.info("command %s failed with %s", name, type(exc).__name__)
        root.error(exc)
    else:
        if root.status.is_pending:
            root.success()

    debug_result(root, channels, label=f"{name} OUTCOME", options=options)

    if root.status is OutcomeStatus.ERROR:
        display_result(root, options, context=f"{name} ERROR", echo=echo)
        return EXIT_ERROR

    if root.status in (OutcomeStatus.FAILURE, OutcomeStatus.WARNING):
        echo(f"{name} finished with warnings:")
        for line in warning_summary(root):
            echo(line)

    return EXIT_OK


def run_parallel(
    parent: OutcomeNode,
    tasks: Mapping[str, Callable[[], Any]],
    kind: OutcomeKind = OutcomeKind.TASK_RUNNER,
    *,
    max_workers: int | None = None,
) -> OutcomeNode:
    """Run *tasks* concurrently, then attach their outcomes to *parent*.

    Each task is called with no arguments. Whatever it returns is attached
    with ``add_resolved_child`` and whatever it raises with
    ``add_rejected_child``, named after the task's key. Attachment happens
    on the calling thread, after every task has finished, in the order
    the tasks were given; an ERROR bubbling out of *parent* stops it at
    that task.
    """
    if not tasks:
        return parent

    results: list[tuple[str, Any, bool]] = []
    with ThreadPoolExecutor(max_workers=max_workers or len(tasks)) as pool:
        futures = [(name, pool.submit(fn)) for name, fn in tasks.items()]
        for name, future in futures:
            try:
                results.append((name, future.result(), False))
            except Exception as exc:
                results.append((name, exc, True))

    logger.debug(
        "%s '%s' collected %d parallel outcome(s)", parent.kind.value, parent.name, len(results)
    )
    for name, value, raised in results:
        if raised:
            parent.add_rejected_child(value, kind, name)
        else:
            parent.add_resolved_child(value, kind, name)
    return parent
