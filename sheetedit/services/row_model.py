from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..errors import (
    FetchError,
    EditInProgressError,
    EditNotAllowedError,
    NoActiveEditError,
    UnknownRowError,
    WriteDispatchError,
)
from ..models.record import SheetRecord
from ..models.snapshot import SheetSnapshot
from ..models.write_result import WriteResult
from .view_policy import DisplayRow, IDENTITY_COLUMN, can_edit_row, render_rows

if TYPE_CHECKING:
    from .repository import SheetRepository

"""Row model: in-memory sheet state plus the single-row edit protocol.

State owned here and nowhere else:

- the last fetched ``SheetSnapshot`` (replaced wholesale by ``load``)
- ``editing_row_index`` and a detached ``draft`` of that row's cells

Edit protocol:

- ``begin_edit`` on a second row while one is in edit raises EditInProgressError
  (the first draft is never discarded implicitly)
- ``save`` commits the draft locally only after the write was dispatched;
  a transport failure keeps the draft so the user can retry
- ``cancel`` drops the draft; records are untouched

Overlapping loads: each ``load`` takes a generation number and a result that
arrives after a newer load started is discarded.
"""

__all__ = [
    "RowModel",
]

logger = logging.getLogger(__name__)


class RowModel:
    def __init__(self, repository: SheetRepository, user_email: str | None = None) -> None:
        self._repository = repository
        self.user_email = user_email or ""
        self._snapshot = SheetSnapshot()
        self._editing_row_index: int | None = None
        self._draft: list[str] = []
        self._generation = 0

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def snapshot(self) -> SheetSnapshot:
        return self._snapshot

    @property
    def header(self) -> tuple[str, ...]:
        return self._snapshot.header

    @property
    def records(self) -> tuple[SheetRecord, ...]:
        return self._snapshot.records

    @property
    def editing_row_index(self) -> int | None:
        return self._editing_row_index

    @property
    def draft(self) -> tuple[str, ...]:
        return tuple(self._draft)

    @property
    def is_editing(self) -> bool:
        return self._editing_row_index is not None

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------
    async def load(self) -> bool:
        """Fetch the sheet and replace the snapshot.

        Returns False when the result was stale (a newer load started while
        this one was in flight) and was dropped, including a stale failure.
        FetchError propagates with the previous snapshot left in place.
        """
        self._generation += 1
        generation = self._generation
        try:
            snapshot = await self._repository.fetch_all()
        except FetchError as e:
            if generation != self._generation:
                logger.debug(f"discarding stale fetch failure generation={generation}: {e}")
                return False
            raise
        if generation != self._generation:
            logger.debug(f"discarding stale fetch generation={generation} latest={self._generation}")
            return False

        self._snapshot = snapshot
        if self._editing_row_index is not None and snapshot.find(self._editing_row_index) is None:
            # 編集中の行が再取得で消えた場合は編集状態を破棄
            logger.warning(f"row {self._editing_row_index} disappeared on reload; edit cancelled")
            self.cancel()
        logger.debug(f"loaded rows={len(snapshot.records)} generation={generation}")
        return True

    # ------------------------------------------------------------------
    # Edit protocol
    # ------------------------------------------------------------------
    def _require_record(self, row_index: int) -> SheetRecord:
        record = self._snapshot.find(row_index)
        if record is None:
            raise UnknownRowError(row_index)
        return record

    def begin_edit(self, row_index: int) -> None:
        if self._editing_row_index is not None:
            if self._editing_row_index == row_index:
                return
            raise EditInProgressError(self._editing_row_index, row_index)
        record = self._require_record(row_index)
        if not can_edit_row(record.cell(IDENTITY_COLUMN), self.user_email):
            raise EditNotAllowedError(row_index)
        self._editing_row_index = row_index
        self._draft = list(record.data)

    def set_cell(self, column: int, value: str) -> None:
        if self._editing_row_index is None:
            raise NoActiveEditError()
        if column < 0:
            raise IndexError(f"column must be >= 0: {column}")
        if column >= len(self._draft):
            self._draft.extend([""] * (column + 1 - len(self._draft)))
        self._draft[column] = value

    def cancel(self) -> None:
        self._editing_row_index = None
        self._draft = []

    async def save(self) -> WriteResult:
        """Send the draft and, once dispatched, commit it into the snapshot.

        Raises:
            NoActiveEditError: nothing is being edited
            UnknownRowError: the edited row is no longer in the snapshot
            WriteDispatchError: the request could not be sent; edit state kept
        """
        row_index = self._editing_row_index
        if row_index is None:
            raise NoActiveEditError()
        self._require_record(row_index)
        data = list(self._draft)

        result = await self._repository.update_one(row_index, data)
        if not result.dispatched:
            raise WriteDispatchError(row_index, result.error or "transport failed")

        if self._snapshot.find(row_index) is not None:
            self._snapshot = self._snapshot.replace_data(row_index, data)
        if self._editing_row_index == row_index:
            self.cancel()
        return result

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------
    def display_rows(self) -> list[DisplayRow]:
        return render_rows(
            self.records,
            self.user_email,
            self.header,
            editing_row_index=self._editing_row_index,
            draft=self._draft if self.is_editing else None,
        )
