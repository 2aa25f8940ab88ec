from __future__ import annotations

import pytest

from cardissue.labels import LabelResolver, StaticLabelStore
from cardissue.lines import split_lines
from cardissue.logging import StructuredLogger
from cardissue.models import ParsedNote
from cardissue.parser import (
    MissingNote,
    MissingTitle,
    apply_author_fallback,
    extract_assignees,
    extract_title,
    parse_note,
    scan_trailing_metadata,
)


def _resolver(*names: str) -> LabelResolver:
    logger = StructuredLogger(name="test-parser", log_format="text", level="WARNING")
    return LabelResolver(StaticLabelStore(names), logger=logger)


def test_labels_after_body() -> None:
    note = parse_note("Fix bug\n\nSomething broke\n/bug /prod", _resolver("bug", "prod"))
    assert note == ParsedNote(
        title="Fix bug", body="Something broke", labels=["bug", "prod"], assignees=[]
    )


def test_title_only() -> None:
    note = parse_note("Title only", _resolver())
    assert note == ParsedNote(title="Title only", body="", labels=[], assignees=[])


def test_unresolved_label_line_stays_in_body_and_stops_scan() -> None:
    raw = "T\nbody line\n@alice @bob\n/unknown-label"
    note = parse_note(raw, _resolver("bug"))
    assert note.labels == []
    assert note.assignees == []
    assert note.body == "body line\n@alice @bob\n/unknown-label"


def test_all_lines_consumed_leaves_empty_body() -> None:
    note = parse_note("T\n@alice\n/bug", _resolver("bug"))
    assert note.body == ""
    assert note.labels == ["bug"]
    assert note.assignees == ["alice"]


def test_accumulates_bottom_up_keeping_token_order() -> None:
    raw = "T\nbody\n/a /b\n@carol\n/c\n@dave @erin"
    note = parse_note(raw, _resolver("a", "b", "c"))
    assert note.assignees == ["dave", "erin", "carol"]
    assert note.labels == ["c", "a", "b"]
    assert note.body == "body"


def test_prose_directive_above_body_line_is_kept() -> None:
    raw = "Idea\n/cool feature idea\nmore prose\n/bug"
    note = parse_note(raw, _resolver("bug", "cool"))
    assert note.labels == ["bug"]
    assert note.body == "/cool feature idea\nmore prose"


def test_partially_matched_label_line_is_metadata() -> None:
    note = parse_note("T\ntext\n/bug /nope", _resolver("bug"))
    assert note.labels == ["bug"]
    assert note.body == "text"


def test_crlf_and_surrounding_blank_lines() -> None:
    raw = "\r\n\r\nTitle\r\n\r\nline one\r\n\r\nline two\r\n\r\n@alice\r\n\r\n"
    note = parse_note(raw, _resolver())
    assert note.title == "Title"
    assert note.body == "line one\n\nline two"
    assert note.assignees == ["alice"]


def test_blank_line_inside_directive_block_ends_scan() -> None:
    note = parse_note("T\nbody\n@alice\n\n/bug", _resolver("bug"))
    assert note.labels == ["bug"]
    assert note.assignees == []
    assert note.body == "body\n@alice"


def test_indented_directive_is_body_text() -> None:
    note = parse_note("T\nbody\n  /bug", _resolver("bug"))
    assert note.labels == []
    assert note.body == "body\n  /bug"


def test_body_round_trips_through_split() -> None:
    raw = "T\n\nfirst\n\n\nsecond\n /x\n@bob"
    note = parse_note(raw, _resolver())
    assert split_lines(note.body) == ["first", "", "", "second", " /x"]


@pytest.mark.parametrize("raw", [None, "", "   ", "\t ", " \n ", "\t\n", "  \r\n  \r\n"])
def test_missing_note(raw: str | None) -> None:
    with pytest.raises(MissingNote):
        parse_note(raw, _resolver())


@pytest.mark.parametrize("raw", ["\n", "\n\n\n", "\r\n\r\n"])
def test_blank_lines_only_is_missing_title(raw: str) -> None:
    with pytest.raises(MissingTitle):
        parse_note(raw, _resolver())


def test_extract_title_skips_leading_blank_lines() -> None:
    assert extract_title(["", "", "T", "x"]) == ("T", ["x"])


def test_extract_assignees() -> None:
    assert extract_assignees("@alice   @bob ") == ["alice", "bob"]
    assert extract_assignees("@alice please look") == []


def test_scan_does_not_touch_body_lines() -> None:
    meta = scan_trailing_metadata(["a", "@x"], _resolver())
    assert meta.retained == ["a"]
    assert meta.assignees == ["x"]


def test_author_fallback_only_when_no_assignees() -> None:
    logger = StructuredLogger(name="test-fallback", log_format="text", level="WARNING")
    empty = ParsedNote(title="T", body="")
    assigned = ParsedNote(title="T", body="", assignees=["alice"])

    assert apply_author_fallback(empty, "octocat", enabled=True, logger=logger).assignees == [
        "octocat"
    ]
    assert apply_author_fallback(empty, "octocat", enabled=False, logger=logger).assignees == []
    assert apply_author_fallback(assigned, "octocat", enabled=True, logger=logger).assignees == [
        "alice"
    ]
