"""Resolution of ``/label`` directive lines against repository labels.

Repository label names are indexed under a canonical key: lower-cased with
every space replaced by a hyphen, so ``/good-first-issue`` matches a label
displayed as ``Good First Issue``. The index is fetched lazily, at most once
per ``LabelResolver``; one resolver lives for one run.

A failed fetch is not fatal. It is logged as a warning and the resolver
keeps an empty index for the rest of the run, so every later label line
resolves to nothing.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Protocol

from .errors import ErrorInfo, classify_error
from .logging import StructuredLogger, get_logger

LABEL_PREFIX = "/"


class LabelStore(Protocol):
    def list_labels(self) -> list[dict[str, Any]]: ...


def canonical_key(name: str) -> str:
    return name.lower().replace(" ", "-")


class LabelIndex(Mapping[str, str]):
    """Canonical key -> label display name."""

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._entries: dict[str, str] = {}
        for name in names:
            self._entries[canonical_key(name)] = name

    @classmethod
    def from_labels(cls, labels: Iterable[Mapping[str, Any]]) -> LabelIndex:
        names: list[str] = []
        for entry in labels:
            name = entry.get("name")
            if isinstance(name, str):
                names.append(name)
        return cls(names)

    def lookup(self, token: str) -> str | None:
        """Display name for a label token (without its ``/``), if any."""
        return self._entries.get(token.lower())

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class StaticLabelStore:
    """Label store over a fixed list of names, for offline parsing."""

    def __init__(self, names: Iterable[str]) -> None:
        self._names = list(names)

    def list_labels(self) -> list[dict[str, Any]]:
        return [{"name": name} for name in self._names]


class LabelResolver:
    def __init__(self, store: LabelStore, logger: StructuredLogger | None = None) -> None:
        self._store = store
        self._logger = logger or get_logger()
        self._index: LabelIndex | None = None
        self.fetch_error: ErrorInfo | None = None

    @property
    def index(self) -> LabelIndex:
        if self._index is None:
            self._index = self._fetch_index()
        return self._index

    def _fetch_index(self) -> LabelIndex:
        try:
            labels = self._store.list_labels()
        except Exception as exc:  # noqa: BLE001 - any store failure degrades to no labels
            self.fetch_error = classify_error(exc)
            self._logger.warning(
                f"failed to get labels from API: {self.fetch_error.message}",
                category=self.fetch_error.category,
            )
            return LabelIndex()
        index = LabelIndex.from_labels(labels)
        self._logger.debug(
            "cached labels:\n" + "\n".join(f"{key}: {name}" for key, name in index.items())
        )
        return index

    def extract_labels(self, line: str) -> list[str]:
        """Labels named on a directive line, in token order.

        Returns an empty list when any token lacks the ``/`` prefix (not a
        label line) or when no token matches a repository label. Unknown
        tokens on an otherwise valid line are dropped.
        """
        index = self.index
        resolved: list[str] = []
        for token in line.strip().split(" "):
            if not token:
                continue
            if not token.startswith(LABEL_PREFIX):
                return []
            name = index.lookup(token[len(LABEL_PREFIX):])
            if name is not None:
                resolved.append(name)
        return resolved


__all__ = [
    "LABEL_PREFIX",
    "LabelIndex",
    "LabelResolver",
    "LabelStore",
    "StaticLabelStore",
    "canonical_key",
]
