from __future__ import annotations

import pytest

from sheetedit.delimited.parser import parse
from sheetedit.models import SheetRecord, SheetSnapshot
from sheetedit.services.view_policy import (
    can_edit_row,
    column_label,
    header_labels,
    is_sensitive_column,
    normalize_email,
    redact,
    render_rows,
    visible_records,
)


def _records(*rows: tuple[str, ...]) -> list[SheetRecord]:
    return [SheetRecord(row_index=i + 2, data=tuple(r)) for i, r in enumerate(rows)]


def test_normalize_email():
    assert normalize_email("  Alice@Example.COM ") == "alice@example.com"
    assert normalize_email(None) == ""


def test_can_edit_row_is_case_and_space_insensitive():
    assert can_edit_row(" ALICE@example.com", "alice@example.com  ")
    assert not can_edit_row("bob@example.com", "alice@example.com")


def test_empty_user_email_owns_nothing():
    assert not can_edit_row("", "")
    assert not can_edit_row("", "   ")
    assert visible_records(_records(("",), ("a@x",)), "") == []


def test_visible_records_excludes_other_users():
    recs = _records(("a@x", "1"), ("b@x", "2"), ("A@X ", "3"))
    visible = visible_records(recs, "a@x")
    assert [r.row_index for r in visible] == [2, 4]


def test_record_without_cells_is_not_visible():
    recs = [SheetRecord(row_index=2, data=())]
    assert visible_records(recs, "a@x") == []


@pytest.mark.parametrize("n_rows,n_cols", [(1, 1), (3, 4), (10, 2)])
def test_round_trip_visibility(n_rows: int, n_cols: int):
    email = "owner@example.com"
    header = ",".join([email] + [f"c{i}" for i in range(1, n_cols)])
    lines = [",".join([email] + [f"v{r}{c}" for c in range(1, n_cols)]) for r in range(n_rows)]
    snap = SheetSnapshot.from_rows(parse("\n".join([header, *lines])))
    assert len(visible_records(snap.records, email)) == n_rows
    assert visible_records(snap.records, "other@example.com") == []


@pytest.mark.parametrize(
    "name,expected",
    [("ApiKey", True), ("my_apikey_2", True), ("IGLink", True), ("profile iglink", True), ("Notes", False), ("", False)],
)
def test_is_sensitive_column(name: str, expected: bool):
    assert is_sensitive_column(name) is expected


def test_redact_truncates_only_when_longer_than_ten():
    assert redact("abcdefghijklmno") == "abcdefghij..."
    assert redact("abcdefghij") == "abcdefghij"
    assert redact("") == ""


def test_apikey_column_redacted_notes_column_not():
    header = ("Email", "ApiKey", "Notes")
    value = "x" * 15
    rows = render_rows(_records(("a@x", value, value)), "a@x", header)
    cells = rows[0].cells
    assert cells[1].value == "x" * 10 + "..."
    assert cells[1].redacted is True
    assert cells[1].title == value
    assert cells[2].value == value
    assert cells[2].redacted is False


def test_short_values_never_truncated():
    header = ("Email", "ApiKey", "IGLink")
    rows = render_rows(_records(("a@x", "0123456789", "short")), "a@x", header)
    assert [c.value for c in rows[0].cells] == ["a@x", "0123456789", "short"]
    assert not any(c.redacted for c in rows[0].cells)


def test_row_in_edit_shows_full_draft_values():
    header = ("Email", "ApiKey")
    recs = _records(("a@x", "k" * 20), ("a@x", "z" * 20))
    draft = ["a@x", "n" * 20]
    rows = render_rows(recs, "a@x", header, editing_row_index=2, draft=draft)
    assert rows[0].editing is True
    assert rows[0].cells[1].value == "n" * 20
    assert rows[0].cells[1].redacted is False
    assert rows[1].editing is False
    assert rows[1].cells[1].value == "z" * 10 + "..."


def test_render_pads_short_rows_to_header_width():
    header = ("Email", "Name", "Notes")
    rows = render_rows(_records(("a@x",)), "a@x", header)
    assert [c.value for c in rows[0].cells] == ["a@x", "", ""]


def test_render_keeps_cells_beyond_header():
    header = ("Email",)
    rows = render_rows(_records(("a@x", "extra")), "a@x", header)
    assert rows[0].cells[1].value == "extra"
    assert rows[0].cells[1].label == "Column B"


def test_column_label_fallback_letters():
    header = ("Email", "", "Notes", "")
    assert header_labels(header) == ["Email", "Column B", "Notes", "Column D"]
    assert column_label((), 0) == "Column A"
    assert column_label((), 25) == "Column Z"
    assert column_label((), 26) == "Column AA"
    assert column_label((), 27) == "Column AB"


def test_render_rows_is_pure():
    recs = _records(("a@x", "1"))
    header = ("Email", "ApiKey")
    first = render_rows(recs, "a@x", header)
    second = render_rows(recs, "a@x", header)
    assert first == second
    assert recs[0].data == ("a@x", "1")
