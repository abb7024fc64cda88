"""Outcome reports: a finished outcome tree persisted as JSON."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from outcometree.model.outcome import OutcomeNode

REPORT_VERSION = 1

_JSON_KEY_TYPES = (str, int, float, bool, type(None))


def _stringify_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            (k if isinstance(k, _JSON_KEY_TYPES) else str(k)): _stringify_keys(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_stringify_keys(v) for v in value]
    return value


def save_report(node: OutcomeNode, path: Path) -> None:
    """Serialise *node* and all of its descendants to JSON at *path*.

    Detail and error data that JSON cannot represent, dict keys included,
    are written as strings.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "version": REPORT_VERSION,
        "saved_at": datetime.now(timezone.utc).isoformat(),
        "outcome": _stringify_keys(node.to_dict()),
    }
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")


def load_report(path: Path) -> OutcomeNode:
    """Read a report written by :func:`save_report`.

    Raises:
        ValueError: If the file does not hold an outcome report.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict) or not isinstance(data.get("outcome"), dict):
        raise ValueError(f"{path} is not an outcome report")
    return OutcomeNode.from_dict(data["outcome"])
