# Shared pytest fixtures
from __future__ import annotations
import json
import tempfile
from pathlib import Path

import httpx
import pytest

from sheetedit.logging.init import reset_logging

CSV_URL = "https://sheets.test/export.csv"
WEBHOOK_URL = "https://hooks.test/exec"

SAMPLE_CSV = (
    "Email,Name,IGLink,Notes\r\n"
    "alice@example.com,Alice,https://instagram.com/alice_the_great,hello\r\n"
    "bob@example.com,Bob,short,\"a,b\"\r\n"
    "\r\n"
    " Alice@Example.com ,Alice 2,,\"say \"\"hi\"\"\"\r\n"
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for name in ("SHEETEDIT_CSV_URL", "SHEETEDIT_WEBHOOK_URL", "SHEETEDIT_USER_EMAIL"):
        monkeypatch.delenv(name, raising=False)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return f"""sheet:
  csv_url: {CSV_URL}
webhook_url: {WEBHOOK_URL}
user_email: alice@example.com
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "sheetedit.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


class SheetServer:
    """Fake remote sheet behind an httpx.MockTransport.

    Records every webhook POST body. Writes are NOT applied to the CSV, the
    same way the real webhook result is invisible to the client.
    """

    csv_url = CSV_URL
    webhook_url = WEBHOOK_URL

    def __init__(self, csv_text: str = SAMPLE_CSV) -> None:
        self.csv_text = csv_text
        self.csv_status = 200
        self.fail_reads = False
        self.fail_writes = False
        self.write_status = 302
        self.writes: list[dict] = []
        self.read_count = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET" and str(request.url) == CSV_URL:
            self.read_count += 1
            if self.fail_reads:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(self.csv_status, text=self.csv_text, headers={"Content-Type": "text/csv"})
        if request.method == "POST" and str(request.url) == WEBHOOK_URL:
            if self.fail_writes:
                raise httpx.ConnectError("network unreachable", request=request)
            self.writes.append(json.loads(request.content))
            return httpx.Response(self.write_status)
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport)


@pytest.fixture()
def sheet_server() -> SheetServer:
    return SheetServer()
