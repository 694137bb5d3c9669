from __future__ import annotations

from dataclasses import dataclass

"""SheetRecord model.

A SheetRecord is one data row of the remote sheet as of the last fetch.
``row_index`` is the sheet's own 1-based row number (header is row 1, so the
first data row is 2) and is the only identity key.
"""

__all__ = [
    "SheetRecord",
    "FIRST_DATA_ROW_INDEX",
]

# 1行目 = ヘッダ, シート行番号は 1 始まり
FIRST_DATA_ROW_INDEX = 2


@dataclass(frozen=True)
class SheetRecord:
    """Immutable snapshot of one sheet row.

    ``data[i]`` lines up with ``header[i]``; the row may be shorter or longer
    than the header. Missing cells read as empty strings via :meth:`cell`.
    """
    row_index: int  # Sheet row number (2 = first data row)
    data: tuple[str, ...]  # Cell values in column order

    def cell(self, column: int) -> str:
        if 0 <= column < len(self.data):
            return self.data[column]
        return ""

    def with_data(self, data: list[str] | tuple[str, ...]) -> SheetRecord:
        """Return a copy carrying new cell values and the same row_index."""
        return SheetRecord(row_index=self.row_index, data=tuple(data))
