from __future__ import annotations

from dataclasses import dataclass, field

from .record import FIRST_DATA_ROW_INDEX, SheetRecord

"""SheetSnapshot model: header plus records from one fetch."""

__all__ = [
    "SheetSnapshot",
]


@dataclass(frozen=True)
class SheetSnapshot:
    """Result of one fetch. Replaced wholesale on every reload."""
    header: tuple[str, ...] = ()
    records: tuple[SheetRecord, ...] = field(default_factory=tuple)

    @classmethod
    def from_rows(cls, rows: list[list[str]]) -> SheetSnapshot:
        """Build a snapshot from parsed rows.

        The first row is the header; each remaining row becomes a record whose
        row_index is its position after the header plus 2.
        """
        if not rows:
            return cls()
        header = tuple(rows[0])
        records = tuple(
            SheetRecord(row_index=pos + FIRST_DATA_ROW_INDEX, data=tuple(data))
            for pos, data in enumerate(rows[1:])
        )
        return cls(header=header, records=records)

    def find(self, row_index: int) -> SheetRecord | None:
        for record in self.records:
            if record.row_index == row_index:
                return record
        return None

    def replace_data(self, row_index: int, data: list[str] | tuple[str, ...]) -> SheetSnapshot:
        """Return a snapshot where only ``row_index`` carries new data.

        Raises KeyError when no record has that row_index.
        """
        if self.find(row_index) is None:
            raise KeyError(row_index)
        records = tuple(
            r.with_data(data) if r.row_index == row_index else r for r in self.records
        )
        return SheetSnapshot(header=self.header, records=records)
