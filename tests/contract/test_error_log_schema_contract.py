from __future__ import annotations

import json
from pathlib import Path

from sheetedit.cli import main as cli_main


def _error_lines(workdir: Path) -> list[dict]:
    files = sorted((workdir / "logs").glob("errors-*.log"))
    assert len(files) == 1
    return [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]


def test_fetch_failure_logged_with_unknown_row(write_config: Path, temp_workdir: Path, sheet_server):
    sheet_server.fail_reads = True
    cli_main(["list"], transport=sheet_server.transport)
    records = _error_lines(temp_workdir)
    assert len(records) == 1
    rec = records[0]
    assert set(rec.keys()) == {"timestamp", "operation", "row", "error_type", "message"}
    assert rec["operation"] == "fetch"
    assert rec["row"] == -1
    assert rec["error_type"] == "FETCH_ERROR"


def test_write_failure_logged_with_row(write_config: Path, temp_workdir: Path, sheet_server):
    sheet_server.fail_writes = True
    cli_main(["update", "4", "--set", "3=x"], transport=sheet_server.transport)
    (rec,) = _error_lines(temp_workdir)
    assert rec["operation"] == "update"
    assert rec["row"] == 4
    assert rec["error_type"] == "WRITE_DISPATCH_ERROR"


def test_success_writes_no_error_log(write_config: Path, temp_workdir: Path, sheet_server):
    cli_main(["list"], transport=sheet_server.transport)
    assert list((temp_workdir / "logs").glob("errors-*.log")) == []
