"""Triggering ``project_card`` event handling.

Two actions are supported. ``created``: a note card was added and still has
to be converted; its text is ``project_card.note``. ``converted``: someone
already converted the card by hand; the webhook only carries the previous
note under ``changes.note.from`` and the issue number must be looked up.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class EventError(ValueError):
    category = "config"


class TriggerKind(str, Enum):
    CREATED = "created"
    CONVERTED = "converted"


@dataclass
class Trigger:
    kind: TriggerKind
    raw_note: str | None
    card_node_id: str | None
    repository_node_id: str | None
    repo: str | None
    actor: str


def _get(payload: Any, *keys: str) -> Any:
    node = payload
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def trigger_from_payload(
    payload: dict[str, Any], *, actor: str | None = None, repo: str | None = None
) -> Trigger:
    action = payload.get("action")
    try:
        kind = TriggerKind(action)
    except ValueError:
        raise EventError(
            f"unsupported trigger action: {action}. See README and fix your workflow."
        ) from None

    if kind is TriggerKind.CREATED:
        raw_note = _get(payload, "project_card", "note")
    else:
        raw_note = _get(payload, "changes", "note", "from")

    return Trigger(
        kind=kind,
        raw_note=_optional_str(raw_note),
        card_node_id=_optional_str(_get(payload, "project_card", "node_id")),
        repository_node_id=_optional_str(_get(payload, "repository", "node_id")),
        repo=repo or _optional_str(_get(payload, "repository", "full_name")),
        actor=actor or _optional_str(_get(payload, "sender", "login")) or "",
    )


def load_event(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise EventError(f"event payload not found: {p}") from exc
    except json.JSONDecodeError as exc:
        raise EventError(f"event payload is not valid JSON: {p}: {exc}") from exc
    if not isinstance(data, dict):
        raise EventError(f"event payload must be a JSON object: {p}")
    return data


def load_trigger(event_path: str | Path | None = None) -> tuple[Trigger, dict[str, Any]]:
    """Read the event from ``event_path`` or ``$GITHUB_EVENT_PATH``."""
    path = event_path or os.environ.get("GITHUB_EVENT_PATH")
    if not path:
        raise EventError("no event payload: pass --event or set GITHUB_EVENT_PATH")
    payload = load_event(path)
    trigger = trigger_from_payload(
        payload,
        actor=os.environ.get("GITHUB_ACTOR") or None,
        repo=os.environ.get("GITHUB_REPOSITORY") or None,
    )
    return trigger, payload


__all__ = [
    "EventError",
    "Trigger",
    "TriggerKind",
    "load_event",
    "load_trigger",
    "trigger_from_payload",
]
