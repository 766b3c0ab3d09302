"""Per-client P&L summaries built from the ledger sheet and group reports."""

from clientpl.core.summaries.config import JoinDateCutoff, SummaryConfig, SummaryConfigError
from clientpl.core.summaries.models import (
    Client,
    ClientSummary,
    Group,
    LedgerRow,
    PerformanceTotals,
    ReportDocument,
    ReportFetchResult,
    StoredDocument,
    SummaryRun,
)
from clientpl.core.summaries.ports import DocumentStorePort, LedgerSourcePort
from clientpl.core.summaries.service import (
    ClientSummaryService,
    LedgerFetchError,
    MissingJoinDateError,
    SummaryFetchError,
)

__all__ = [
    "Client",
    "ClientSummary",
    "Group",
    "LedgerRow",
    "PerformanceTotals",
    "ReportDocument",
    "ReportFetchResult",
    "StoredDocument",
    "SummaryRun",
    "DocumentStorePort",
    "LedgerSourcePort",
    "JoinDateCutoff",
    "SummaryConfig",
    "SummaryConfigError",
    "ClientSummaryService",
    "LedgerFetchError",
    "MissingJoinDateError",
    "SummaryFetchError",
]
