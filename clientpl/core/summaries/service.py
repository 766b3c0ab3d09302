from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional, Sequence, TypeVar, Union

from clientpl.core.summaries.config import SummaryConfig
from clientpl.core.summaries.groups import resolve_client_groups
from clientpl.core.summaries.ledger import aggregate_performance
from clientpl.core.summaries.models import (
    Client,
    ClientSummary,
    Group,
    LedgerRow,
    SummaryRun,
)
from clientpl.core.summaries.ports import DocumentStorePort, LedgerSourcePort
from clientpl.core.summaries.reports import count_reports

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class SummaryFetchError(RuntimeError):
    """Raised when clients, groups, or the ledger cannot be loaded."""


class LedgerFetchError(SummaryFetchError):
    """Raised when the ledger sheet cannot be loaded."""


class MissingJoinDateError(ValueError):
    """Raised when a client that must be aggregated has no readable joining date."""


class ClientSummaryService:
    def __init__(
        self,
        store: DocumentStorePort,
        ledger_source: LedgerSourcePort,
        config: SummaryConfig,
    ) -> None:
        self._store = store
        self._ledger_source = ledger_source
        self._config = config

    @property
    def config(self) -> SummaryConfig:
        return self._config

    async def compute_all(self) -> SummaryRun:
        clients = [
            Client.from_document(doc)
            for doc in await self._fetch(
                self._store.list_collection(self._config.clients_collection),
                what=f"collection {self._config.clients_collection}",
            )
        ]
        groups = [
            Group.from_document(doc)
            for doc in await self._fetch(
                self._store.list_collection(self._config.groups_collection),
                what=f"collection {self._config.groups_collection}",
            )
        ]
        ledger = await self.load_ledger()
        logger.info(
            "Computing client summaries clients=%s groups=%s ledger_rows=%s",
            len(clients),
            len(groups),
            len(ledger),
        )

        limiter = asyncio.Semaphore(self._config.max_concurrent_fetches)
        tasks = [
            asyncio.ensure_future(self.build_summary(client, groups, ledger, limiter=limiter))
            for client in clients
        ]
        try:
            users = await asyncio.gather(*tasks)
        except BaseException:
            # One failed client fails the run; stop the report fetches still in flight.
            for task in tasks:
                task.cancel()
            raise
        run = SummaryRun(users=tuple(users), groups=tuple(groups))
        logger.info("Computed client summaries aggregated=%s", len(run.summaries))
        return run

    async def load_ledger(self) -> tuple[LedgerRow, ...]:
        try:
            rows = await asyncio.wait_for(
                self._ledger_source.get_range(
                    self._config.spreadsheet_id,
                    self._config.sheet_name,
                ),
                timeout=self._config.fetch_timeout,
            )
        except Exception as exc:
            logger.exception("Error fetching ledger sheet=%s", self._config.sheet_name)
            raise LedgerFetchError("Failed to fetch master sheet data") from exc
        return tuple(LedgerRow.from_cells(cells) for cells in rows or [])

    async def build_summary(
        self,
        client: Client,
        groups: Sequence[Group],
        ledger: Sequence[LedgerRow],
        *,
        limiter: Optional[asyncio.Semaphore] = None,
    ) -> Union[ClientSummary, Client]:
        if not client.is_aggregated:
            logger.debug("Skipping client=%s role=%s", client.id, client.role)
            return client
        if client.joined_at is None:
            raise MissingJoinDateError(f"client {client.id} has no readable joining_date")

        member_groups = resolve_client_groups(client, groups)
        reports_task = asyncio.ensure_future(
            count_reports(
                self._store,
                client,
                member_groups,
                config=self._config,
                limiter=limiter,
            )
        )
        try:
            totals = aggregate_performance(client, member_groups, ledger)
        except BaseException:
            reports_task.cancel()
            raise
        total_reports = await reports_task

        return ClientSummary(
            client=client,
            total_pl_percentage=totals.pl_percentage_total,
            total_pl_abs=totals.pl_abs_total,
            total_calls=totals.total_calls,
            total_reports=total_reports,
            failed_groups=totals.failed_groups,
        )

    async def _fetch(self, call: Awaitable[_T], *, what: str) -> _T:
        try:
            return await asyncio.wait_for(call, timeout=self._config.fetch_timeout)
        except Exception as exc:
            logger.exception("Error fetching %s", what)
            raise SummaryFetchError(f"Failed to fetch {what}") from exc
