from __future__ import annotations

import asyncio
import logging
from contextlib import nullcontext
from datetime import datetime
from typing import Iterable, Optional

from clientpl.core.summaries.config import JoinDateCutoff, SummaryConfig
from clientpl.core.summaries.dates import utc_midnight
from clientpl.core.summaries.models import Client, Group, ReportDocument, ReportFetchResult
from clientpl.core.summaries.ports import DocumentStorePort

logger = logging.getLogger(__name__)


async def fetch_group_reports(
    store: DocumentStorePort,
    group: Group,
    *,
    path: str,
    timeout: float,
    limiter: Optional[asyncio.Semaphore] = None,
) -> ReportFetchResult:
    """Fetch one group's reports; failures and timeouts become a failed result."""
    try:
        async with limiter or nullcontext():
            documents = await asyncio.wait_for(store.list_collection(path), timeout=timeout)
    except Exception as exc:
        error = str(exc) or type(exc).__name__
        logger.warning(
            "Report fetch failed group=%s path=%s error=%s",
            group.name,
            path,
            error,
        )
        return ReportFetchResult(group=group, error=error)
    return ReportFetchResult(
        group=group,
        documents=tuple(ReportDocument.from_document(doc) for doc in documents),
    )


def count_reports_since(documents: Iterable[ReportDocument], cutoff: datetime) -> int:
    return sum(
        1
        for doc in documents
        if doc.timestamp is not None and doc.timestamp >= cutoff
    )


def report_cutoff(client: Client, mode: JoinDateCutoff) -> datetime:
    if client.joined_at is None:
        raise ValueError(f"client {client.id} has no joining date")
    if mode == JoinDateCutoff.UTC_MIDNIGHT:
        return utc_midnight(client.joined_at)
    return client.joined_at


async def count_reports(
    store: DocumentStorePort,
    client: Client,
    groups: Iterable[Group],
    *,
    config: SummaryConfig,
    limiter: Optional[asyncio.Semaphore] = None,
) -> int:
    """
    Count report documents across the client's groups since the join cutoff.

    Groups are fetched concurrently. A group whose fetch fails contributes
    nothing; the remaining groups are still counted.
    """
    cutoff = report_cutoff(client, config.report_join_cutoff)
    results = await asyncio.gather(
        *(
            fetch_group_reports(
                store,
                group,
                path=config.reports_path(group.id),
                timeout=config.fetch_timeout,
                limiter=limiter,
            )
            for group in groups
        )
    )
    failed = [result.group.name for result in results if not result.ok]
    if failed:
        logger.info("Report counts for client=%s exclude groups=%s", client.id, failed)
    return sum(count_reports_since(result.documents, cutoff) for result in results if result.ok)
