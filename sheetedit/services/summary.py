from __future__ import annotations

from ..models.snapshot import SheetSnapshot

"""SUMMARY line rendering for the terminal front-end.

Returns the body only; ``log_summary`` adds the SUMMARY label.
"""


def render_summary_line(snapshot: SheetSnapshot, visible: int) -> str:
    """Render the SUMMARY body for one listing.

    Examples:
        >>> from sheetedit.models import SheetSnapshot
        >>> snap = SheetSnapshot.from_rows([["Email", "Notes"], ["a@x", "n"], ["b@x", "m"]])
        >>> render_summary_line(snap, 1)
        'rows=2 visible=1 columns=2'
    """
    return (
        f"rows={len(snapshot.records)} "
        f"visible={visible} "
        f"columns={len(snapshot.header)}"
    )
