from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Write result model.

The webhook answers with an opaque response, so the only thing a caller can
know is whether the request left the process. DISPATCHED therefore means
"request sent", never "saved".
"""

__all__ = [
    "WriteOutcome",
    "WriteResult",
]


class WriteOutcome(str, Enum):
    DISPATCHED = "dispatched"
    TRANSPORT_FAILED = "transport_failed"


@dataclass(frozen=True)
class WriteResult:
    row_index: int
    outcome: WriteOutcome
    error: str | None = None  # transport error text when TRANSPORT_FAILED

    @property
    def dispatched(self) -> bool:
        return self.outcome is WriteOutcome.DISPATCHED
