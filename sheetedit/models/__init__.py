"""Domain models for the sheet row editor."""

from .config_models import AppConfig, SheetSourceConfig
from .error_record import ErrorRecord
from .record import FIRST_DATA_ROW_INDEX, SheetRecord
from .snapshot import SheetSnapshot
from .write_result import WriteOutcome, WriteResult

__all__ = [
    # Configuration models
    "AppConfig",
    "SheetSourceConfig",
    # Sheet models
    "FIRST_DATA_ROW_INDEX",
    "SheetRecord",
    "SheetSnapshot",
    "WriteOutcome",
    "WriteResult",
    # Error logging
    "ErrorRecord",
]
