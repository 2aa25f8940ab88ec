from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ParsedNote:
    """Issue fields extracted from a card note.

    ``labels`` and ``assignees`` keep discovery order and may contain
    duplicates; the API collapses them on update.
    """

    title: str
    body: str
    labels: list[str] = field(default_factory=list)
    assignees: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "body": self.body,
            "labels": list(self.labels),
            "assignees": list(self.assignees),
        }


@dataclass
class TrailingMetadata:
    retained: list[str]
    labels: list[str] = field(default_factory=list)
    assignees: list[str] = field(default_factory=list)


__all__ = ["ParsedNote", "TrailingMetadata"]
