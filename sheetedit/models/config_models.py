from __future__ import annotations

from dataclasses import dataclass

"""Config dataclasses for the sheet row editor.

Built by ``sheetedit.config.loader.load_config``; environment variables have
already been applied by the time these objects exist.
"""

__all__ = [
    "SheetSourceConfig",
    "AppConfig",
    "EXPORT_URL_TEMPLATE",
]

EXPORT_URL_TEMPLATE = "https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv&gid={gid}"


@dataclass(frozen=True)
class SheetSourceConfig:
    """Where the CSV export is read from.

    Either ``csv_url`` is given directly, or it is derived from ``sheet_id`` + ``gid``.
    """
    sheet_id: str | None = None
    gid: int = 0
    csv_url: str | None = None

    @property
    def export_url(self) -> str:
        if self.csv_url:
            return self.csv_url
        if not self.sheet_id:
            raise ValueError("sheet source needs either csv_url or sheet_id")
        return EXPORT_URL_TEMPLATE.format(sheet_id=self.sheet_id, gid=self.gid)


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    sheet: SheetSourceConfig
    webhook_url: str  # Row write endpoint (POST JSON, opaque response)
    user_email: str | None = None  # Signed-in user (identity provider stand-in)
    timeout_seconds: float | None = None  # None = wait for the transport indefinitely

    @property
    def csv_url(self) -> str:
        return self.sheet.export_url
