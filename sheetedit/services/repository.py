from __future__ import annotations

import logging
from collections.abc import Sequence
from types import TracebackType

import httpx

from ..delimited.parser import parse
from ..errors import FetchError
from ..models.snapshot import SheetSnapshot
from ..models.write_result import WriteOutcome, WriteResult

"""Repository for the remote sheet.

Reads go to the CSV export endpoint; writes go to a webhook that accepts
``{"rowIndex": int, "data": [str, ...]}``. The webhook's response is treated as
opaque: a write is reported as DISPATCHED as soon as the request was sent
without a local transport error, whatever the store did with it.
"""

__all__ = [
    "SheetRepository",
]

logger = logging.getLogger(__name__)


class SheetRepository:
    """Async access to the remote sheet.

    Pass ``client`` to share an ``httpx.AsyncClient`` (or to inject a mock
    transport in tests); otherwise the repository creates and owns one.
    """

    def __init__(
        self,
        csv_url: str,
        webhook_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self.csv_url = csv_url
        self.webhook_url = webhook_url
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout_seconds)

    async def __aenter__(self) -> SheetRepository:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_all(self) -> SheetSnapshot:
        """Fetch and parse the whole sheet.

        Raises:
            FetchError: unusable URL, transport failure or non-2xx status
        """
        logger.debug(f"fetch url={self.csv_url}")
        try:
            # export URL は googleusercontent へリダイレクトされる
            response = await self._client.get(self.csv_url, follow_redirects=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(self.csv_url, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise FetchError(
                self.csv_url,
                response.reason_phrase or "unexpected status",
                status_code=response.status_code,
            )

        snapshot = SheetSnapshot.from_rows(parse(response.text))
        logger.debug(f"fetched columns={len(snapshot.header)} rows={len(snapshot.records)}")
        return snapshot

    async def update_one(self, row_index: int, data: Sequence[str]) -> WriteResult:
        """Send one row write to the webhook.

        Never raises for transport problems or an unusable URL; they come back as TRANSPORT_FAILED.
        The HTTP status of the reply is deliberately not consulted.
        """
        payload = {"rowIndex": row_index, "data": list(data)}
        try:
            await self._client.post(self.webhook_url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            message = str(e) or type(e).__name__
            logger.debug(f"write not sent row={row_index}: {message}")
            return WriteResult(row_index=row_index, outcome=WriteOutcome.TRANSPORT_FAILED, error=message)
        logger.debug(f"write dispatched row={row_index} cells={len(payload['data'])}")
        return WriteResult(row_index=row_index, outcome=WriteOutcome.DISPATCHED)
