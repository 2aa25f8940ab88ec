"""Card note parser.

A note looks like::

    Fix login redirect            <- title: first non-empty line

    Users land on /home after     <- body
    signing in from a deep link.

    @alice @bob                   <- assignee line
    /bug /needs-triage            <- label line

Directive lines are only recognised as a contiguous run at the very end of
the note. The run is read bottom-up and ends at the first line that is not
a valid directive; that line and everything above it stay in the body, so
prose that happens to start with ``/`` or ``@`` higher up is never eaten.
A label line whose tokens match no repository label also ends the run.
"""

from __future__ import annotations

from dataclasses import replace

from .labels import LABEL_PREFIX, LabelResolver
from .lines import split_lines, trim_empty, trim_leading_empty, trim_trailing_empty
from .logging import StructuredLogger, get_logger
from .models import ParsedNote, TrailingMetadata

ASSIGNEE_PREFIX = "@"


class NoteError(ValueError):
    category = "note"


class MissingNote(NoteError):
    pass


class MissingTitle(NoteError):
    pass


def _is_blank(raw_note: str) -> bool:
    """Whitespace only, but not merely line breaks (those are a missing title)."""
    return not raw_note.strip() and any(line != "" for line in split_lines(raw_note))


def extract_title(lines: list[str]) -> tuple[str, list[str]]:
    """Split off the first non-empty line as the title."""
    remaining = trim_leading_empty(lines)
    if not remaining:
        raise MissingTitle("title is required for issues")
    return remaining[0], remaining[1:]


def extract_assignees(line: str) -> list[str]:
    logins: list[str] = []
    for token in line.strip().split(" "):
        if not token:
            continue
        if not token.startswith(ASSIGNEE_PREFIX):
            return []
        logins.append(token[len(ASSIGNEE_PREFIX):])
    return logins


def scan_trailing_metadata(lines: list[str], resolver: LabelResolver) -> TrailingMetadata:
    labels: list[str] = []
    assignees: list[str] = []
    i = len(lines) - 1
    while i >= 0:
        line = lines[i]
        if line.startswith(LABEL_PREFIX):
            found = resolver.extract_labels(line)
            if not found:
                break
            labels.extend(found)
        elif line.startswith(ASSIGNEE_PREFIX):
            found = extract_assignees(line)
            if not found:
                break
            assignees.extend(found)
        else:
            break
        i -= 1
    return TrailingMetadata(retained=lines[: i + 1], labels=labels, assignees=assignees)


def assemble_body(lines: list[str]) -> str:
    return "\n".join(trim_empty(lines))


def parse_note(raw_note: str | None, resolver: LabelResolver) -> ParsedNote:
    if not raw_note or _is_blank(raw_note):
        raise MissingNote("card's note is missing, or empty")
    title, rest = extract_title(split_lines(raw_note))
    meta = scan_trailing_metadata(trim_trailing_empty(rest), resolver)
    return ParsedNote(
        title=title,
        body=assemble_body(meta.retained),
        labels=meta.labels,
        assignees=meta.assignees,
    )


def apply_author_fallback(
    note: ParsedNote,
    actor: str,
    *,
    enabled: bool,
    logger: StructuredLogger | None = None,
) -> ParsedNote:
    """Make ``actor`` the sole assignee when the note named nobody."""
    if note.assignees or not enabled:
        return note
    (logger or get_logger()).info(
        "no assignees in card and option `assign_author` is set. "
        f"Populating card author `{actor}`..."
    )
    return replace(note, assignees=[actor])


__all__ = [
    "ASSIGNEE_PREFIX",
    "MissingNote",
    "MissingTitle",
    "NoteError",
    "apply_author_fallback",
    "assemble_body",
    "extract_assignees",
    "extract_title",
    "parse_note",
    "scan_trailing_metadata",
]
