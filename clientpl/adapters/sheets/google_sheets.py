from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from googleapiclient.discovery import build

from clientpl.adapters.google.credentials import ServiceAccountConfig
from clientpl.adapters.google.retrying import google_retrying
from clientpl.core.summaries.models import Cell
from clientpl.core.summaries.ports import LedgerSourcePort

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]


class GoogleSheetsLedgerSource(LedgerSourcePort):
    def __init__(
        self,
        service: Optional[Any] = None,
        *,
        config: Optional[ServiceAccountConfig] = None,
        retry_attempts: Optional[int] = None,
        retry_wait: Optional[float] = None,
        retry_deadline: Optional[float] = None,
    ) -> None:
        if service is None and config is None:
            raise ValueError("GoogleSheetsLedgerSource needs a service or a ServiceAccountConfig")
        self._service = service
        self._config = config
        self._retry_attempts = retry_attempts if retry_attempts is not None else (
            config.retry_attempts if config else 3
        )
        self._retry_wait = retry_wait if retry_wait is not None else (
            config.retry_wait if config else 0.5
        )
        self._retry_deadline = retry_deadline

    @property
    def service(self) -> Any:
        if self._service is None:
            creds = self._config.credentials(SCOPES)
            self._service = build("sheets", "v4", credentials=creds, cache_discovery=False)
        return self._service

    async def get_range(self, sheet_id: str, range_name: str) -> list[list[Cell]]:
        return await asyncio.to_thread(self._get_range_with_retry, sheet_id, range_name)

    def _get_range_with_retry(self, sheet_id: str, range_name: str) -> list[list[Cell]]:
        retrying = google_retrying(self._retry_attempts, self._retry_wait, self._retry_deadline)
        return retrying(self._get_range, sheet_id, range_name)

    def _get_range(self, sheet_id: str, range_name: str) -> list[list[Cell]]:
        resp = (
            self.service.spreadsheets()
            .values()
            .get(spreadsheetId=sheet_id, range=range_name)
            .execute()
        )
        rows = resp.get("values") or []
        logger.info("Fetched ledger range=%s rows=%s", range_name, len(rows))
        return [list(row) for row in rows]
