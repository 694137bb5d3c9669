from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import httpx
from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..errors import EditError, FetchError, WriteDispatchError
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary, setup_logging
from ..models.config_models import AppConfig
from ..models.error_record import EDIT_REJECTED, FETCH_ERROR, WRITE_DISPATCH_ERROR, ErrorRecord
from ..services.repository import SheetRepository
from ..services.row_model import RowModel
from ..services.summary import render_summary_line
from ..services.view_policy import header_labels

"""Terminal front-end.

Stands in for the presentation layer: loads the sheet for one user, prints the
rows that user may see, and can edit + save one row.

    sheetedit [--config PATH] [--user EMAIL] [--debug] list
    sheetedit [--config PATH] [--user EMAIL] [--debug] update ROW --set COL=VALUE [...]

A successful update only means the request was sent; the webhook reply is
opaque, so the front-end never reports a row as "saved".
"""

__all__ = [
    "main",
    "EXIT_SUCCESS",
    "EXIT_FATAL",
    "EXIT_REJECTED",
]

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_REJECTED = 2


def _parse_assignment(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"expected COL=VALUE, got {raw!r}")
    return key.strip(), value


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="sheetedit", description="View and edit your rows of a shared spreadsheet")
    p.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="YAML config path")
    p.add_argument("--user", default=None, help="Signed-in user email (overrides config)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="Print the rows visible to the user")
    up = sub.add_parser("update", help="Edit one row and send it to the sheet")
    up.add_argument("row", type=int, help="Sheet row number (first data row is 2)")
    up.add_argument(
        "--set",
        dest="assignments",
        action="append",
        type=_parse_assignment,
        required=True,
        metavar="COL=VALUE",
        help="Column (0-based index or header label) and new value; repeatable",
    )
    return p.parse_args(argv)


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv; its values win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _resolve_column(header: tuple[str, ...], key: str) -> int | None:
    if key.isdigit():
        return int(key)
    lowered = key.lower()
    for i, label in enumerate(header_labels(header)):
        if label.lower() == lowered:
            return i
    return None


def _print_listing(model: RowModel) -> int:
    labels = header_labels(model.header)
    print("\t".join(["row", *labels]))
    rows = model.display_rows()
    for row in rows:
        print("\t".join([str(row.row_index), *(c.value for c in row.cells)]))
    if not rows:
        print("(no rows)")
    return len(rows)


async def _update(model: RowModel, args: argparse.Namespace, errors: ErrorLogBuffer) -> int:
    logger = setup_logging()
    try:
        model.begin_edit(args.row)
    except EditError as e:
        logger.error(f"edit: {e}")
        errors.append(ErrorRecord.create("update", args.row, EDIT_REJECTED, str(e)))
        return EXIT_REJECTED

    for key, value in args.assignments:
        col = _resolve_column(model.header, key)
        if col is None:
            model.cancel()
            logger.error(f"edit: unknown column {key!r}")
            errors.append(ErrorRecord.create("update", args.row, EDIT_REJECTED, f"unknown column {key!r}"))
            return EXIT_REJECTED
        model.set_cell(col, value)

    try:
        await model.save()
    except WriteDispatchError as e:
        logger.error(f"update: {e}")
        errors.append(ErrorRecord.create("update", args.row, WRITE_DISPATCH_ERROR, e.message))
        return EXIT_REJECTED

    # 書き込み結果は不透明: 送信済みのみ報告
    logger.info(f"request sent row={args.row} (the sheet does not confirm writes)")
    return EXIT_SUCCESS


async def _run(
    args: argparse.Namespace,
    cfg: AppConfig,
    user_email: str,
    transport: httpx.AsyncBaseTransport | None,
) -> int:
    logger = setup_logging()
    errors = ErrorLogBuffer()
    try:
        async with httpx.AsyncClient(timeout=cfg.timeout_seconds, transport=transport) as client:
            repository = SheetRepository(cfg.csv_url, cfg.webhook_url, client=client)
            model = RowModel(repository, user_email=user_email)
            try:
                await model.load()
            except FetchError as e:
                logger.error(f"fetch: {e}")
                errors.append(ErrorRecord.create("fetch", -1, FETCH_ERROR, str(e)))
                return EXIT_FATAL

            if args.command == "list":
                visible = _print_listing(model)
                log_summary(render_summary_line(model.snapshot, visible))
                return EXIT_SUCCESS
            return await _update(model, args, errors)
    finally:
        path = errors.flush()
        if path is not None:
            logger.debug(f"error log written: {path}")


def main(argv: list[str] | None = None, transport: httpx.AsyncBaseTransport | None = None) -> int:
    """CLI entry point. ``transport`` lets tests substitute the HTTP layer."""
    # None のときのみ sys.argv を読む (テストで main([]) を呼ぶため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(Path(args.config))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    user_email = args.user or cfg.user_email
    if not user_email or not user_email.strip():
        logger.error("no user email: pass --user or set user_email / SHEETEDIT_USER_EMAIL")
        return EXIT_FATAL

    return asyncio.run(_run(args, cfg, user_email, transport))
