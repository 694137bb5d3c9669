from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..models.record import SheetRecord

"""Per-user view policy.

Pure functions over ``(records, user_email, header)``; nothing here keeps state
or touches the network, so the policy is simply re-run on every render.

- Visibility: a record is shown only when its identity column (column 0)
  matches the signed-in email, compared trimmed and case-insensitively.
- Redaction: cells under a header containing "iglink" or "apikey" show their
  first 10 characters plus "..." when longer than 10. The full value stays in
  ``DisplayCell.title``. The row being edited is never redacted.
"""

__all__ = [
    "IDENTITY_COLUMN",
    "REDACT_MAX_CHARS",
    "REDACT_MARKER",
    "SENSITIVE_HEADER_KEYS",
    "DisplayCell",
    "DisplayRow",
    "normalize_email",
    "can_edit_row",
    "is_visible",
    "visible_records",
    "is_sensitive_column",
    "redact",
    "column_label",
    "header_labels",
    "render_rows",
]

IDENTITY_COLUMN = 0
REDACT_MAX_CHARS = 10
REDACT_MARKER = "..."
SENSITIVE_HEADER_KEYS = ("iglink", "apikey")


@dataclass(frozen=True)
class DisplayCell:
    column: int
    label: str  # header name or "Column X" fallback
    value: str  # what to show at a glance (possibly truncated)
    title: str  # full untruncated value (tooltip)
    redacted: bool = False


@dataclass(frozen=True)
class DisplayRow:
    row_index: int
    cells: tuple[DisplayCell, ...]
    editing: bool = False


def normalize_email(value: str | None) -> str:
    return (value or "").strip().lower()


def can_edit_row(row_email: str | None, user_email: str | None) -> bool:
    """True when the row's identity cell belongs to the user.

    An empty user email owns nothing, even rows whose identity cell is blank.
    """
    user = normalize_email(user_email)
    if not user:
        return False
    return normalize_email(row_email) == user


def is_visible(record: SheetRecord, user_email: str | None) -> bool:
    return can_edit_row(record.cell(IDENTITY_COLUMN), user_email)


def visible_records(records: Iterable[SheetRecord], user_email: str | None) -> list[SheetRecord]:
    """Records owned by ``user_email``, in fetch order. Others are dropped entirely."""
    return [r for r in records if is_visible(r, user_email)]


def is_sensitive_column(name: str | None) -> bool:
    lowered = (name or "").lower()
    return any(key in lowered for key in SENSITIVE_HEADER_KEYS)


def redact(value: str) -> str:
    if len(value) > REDACT_MAX_CHARS:
        return value[:REDACT_MAX_CHARS] + REDACT_MARKER
    return value


def _column_letters(index: int) -> str:
    # 0 -> A, 25 -> Z, 26 -> AA (スプレッドシートの列記法)
    n = index + 1
    letters = ""
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def column_label(header: Sequence[str], index: int) -> str:
    """Header name for ``index``, or ``"Column <letters>"`` when unnamed."""
    name = header[index] if 0 <= index < len(header) else ""
    if name:
        return name
    return f"Column {_column_letters(index)}"


def header_labels(header: Sequence[str]) -> list[str]:
    return [column_label(header, i) for i in range(len(header))]


def render_rows(
    records: Iterable[SheetRecord],
    user_email: str | None,
    header: Sequence[str],
    editing_row_index: int | None = None,
    draft: Sequence[str] | None = None,
) -> list[DisplayRow]:
    """Build display rows for the records ``user_email`` may see.

    The row matching ``editing_row_index`` shows ``draft`` (full values, no
    redaction) when a draft is given.
    """
    rows: list[DisplayRow] = []
    for record in visible_records(records, user_email):
        editing = editing_row_index is not None and record.row_index == editing_row_index
        values: Sequence[str] = draft if (editing and draft is not None) else record.data
        width = max(len(header), len(values))
        cells = []
        for col in range(width):
            raw = values[col] if col < len(values) else ""
            name = header[col] if col < len(header) else ""
            shown = raw if editing or not is_sensitive_column(name) else redact(raw)
            cells.append(
                DisplayCell(
                    column=col,
                    label=column_label(header, col),
                    value=shown,
                    title=raw,
                    redacted=shown != raw,
                )
            )
        rows.append(DisplayRow(row_index=record.row_index, cells=tuple(cells), editing=editing))
    return rows
