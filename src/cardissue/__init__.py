"""CardIssue - turn project-board card notes into GitHub issues.

High-level public API:

from cardissue import LabelResolver, StaticLabelStore, parse_note

resolver = LabelResolver(StaticLabelStore(["bug", "Needs Triage"]))
note = parse_note("Fix login\\n\\nIt broke\\n@alice\\n/bug /needs-triage", resolver)
print(note.title, note.labels, note.assignees)

The ``cardissue run`` command wires the parser to the triggering
``project_card`` event and the GitHub API.
"""

from __future__ import annotations

from .labels import LabelIndex, LabelResolver, StaticLabelStore
from .models import ParsedNote
from .parser import MissingNote, MissingTitle, NoteError, apply_author_fallback, parse_note

__version__ = "0.1.0"

__all__ = [
    "LabelIndex",
    "LabelResolver",
    "MissingNote",
    "MissingTitle",
    "NoteError",
    "ParsedNote",
    "StaticLabelStore",
    "apply_author_fallback",
    "parse_note",
    "__version__",
]
