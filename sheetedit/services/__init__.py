from .repository import SheetRepository
from .row_model import RowModel

__all__ = ["RowModel", "SheetRepository"]
