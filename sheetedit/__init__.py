"""Sheet row editor: per-user view and edit of a remote spreadsheet."""

__version__ = "0.1.0"
