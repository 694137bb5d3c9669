from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

Structured record of a failed fetch or row write, serialised as one JSON line.
``row=-1`` is used for failures that are not tied to a row (whole-sheet fetch).
"""

__all__ = [
    "ErrorRecord",
    "FETCH_ERROR",
    "WRITE_DISPATCH_ERROR",
    "EDIT_REJECTED",
]

FETCH_ERROR = "FETCH_ERROR"
WRITE_DISPATCH_ERROR = "WRITE_DISPATCH_ERROR"
EDIT_REJECTED = "EDIT_REJECTED"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        operation: "fetch" or "update"
        row: Sheet row index. -1 when the failure concerns the whole sheet
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human readable description
    """
    timestamp: str  # ISO8601 UTC
    operation: str
    row: int  # 行番号。シート全体の場合 -1
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(operation: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            operation=operation,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
