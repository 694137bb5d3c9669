from __future__ import annotations

"""Exception hierarchy for the sheet synchronisation layer.

None of these are fatal: callers report them and the user retries.
"""

__all__ = [
    "SheetEditError",
    "FetchError",
    "WriteDispatchError",
    "EditError",
    "EditInProgressError",
    "EditNotAllowedError",
    "NoActiveEditError",
    "UnknownRowError",
]


class SheetEditError(Exception):
    """Base exception for sheet read/write/edit failures."""


class FetchError(SheetEditError):
    """Raised when the CSV export could not be read (non-2xx or transport failure)."""

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        self.message = message
        code = status_code if status_code is not None else "unknown"
        super().__init__(f"fetch failed (HTTP {code}) for {url}: {message}")


class WriteDispatchError(SheetEditError):
    """Raised when a row write could not be sent at all (local transport failure).

    A write that was sent but silently rejected by the store is NOT reported here;
    that case cannot be observed.
    """

    def __init__(self, row_index: int, message: str) -> None:
        self.row_index = row_index
        self.message = message
        super().__init__(f"write for row {row_index} was not sent: {message}")


class EditError(SheetEditError):
    """Base exception for edit protocol violations."""


class EditInProgressError(EditError):
    def __init__(self, editing_row_index: int, requested_row_index: int) -> None:
        self.editing_row_index = editing_row_index
        self.requested_row_index = requested_row_index
        super().__init__(
            f"row {editing_row_index} is already being edited; "
            f"save or cancel it before editing row {requested_row_index}"
        )


class EditNotAllowedError(EditError):
    def __init__(self, row_index: int) -> None:
        self.row_index = row_index
        super().__init__(f"row {row_index} is not editable by the current user")


class NoActiveEditError(EditError):
    def __init__(self) -> None:
        super().__init__("no row is being edited")


class UnknownRowError(EditError):
    def __init__(self, row_index: int) -> None:
        self.row_index = row_index
        super().__init__(f"row {row_index} is not in the current sheet snapshot")
