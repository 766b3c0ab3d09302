from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum


class SummaryConfigError(RuntimeError):
    """Raised when the summary configuration is missing or invalid."""


class JoinDateCutoff(str, Enum):
    """How a client's join date is turned into a cutoff instant."""

    EXACT = "exact"
    UTC_MIDNIGHT = "utc_midnight"


@dataclass(frozen=True)
class SummaryConfig:
    spreadsheet_id: str
    sheet_name: str = "Sheet1"
    clients_collection: str = "users"
    groups_collection: str = "groups"
    reports_collection: str = "reports"
    fetch_timeout: float = 30.0
    max_concurrent_fetches: int = 8
    # The ledger path always cuts off at UTC midnight; reports historically
    # compared against the raw join instant.
    report_join_cutoff: JoinDateCutoff = JoinDateCutoff.EXACT

    def __post_init__(self) -> None:
        if not self.spreadsheet_id:
            raise SummaryConfigError("spreadsheet_id is required")
        if self.fetch_timeout <= 0:
            raise SummaryConfigError("fetch_timeout must be greater than zero")
        if self.max_concurrent_fetches < 1:
            raise SummaryConfigError("max_concurrent_fetches must be at least 1")

    @classmethod
    def from_env(cls) -> "SummaryConfig":
        spreadsheet_id = os.getenv("LEDGER_SPREADSHEET_ID")
        if not spreadsheet_id:
            raise SummaryConfigError("LEDGER_SPREADSHEET_ID is not set")
        return cls(
            spreadsheet_id=spreadsheet_id,
            sheet_name=os.getenv("LEDGER_SHEET_NAME", "Sheet1"),
            clients_collection=os.getenv("CLIENTS_COLLECTION", "users"),
            groups_collection=os.getenv("GROUPS_COLLECTION", "groups"),
            reports_collection=os.getenv("REPORTS_COLLECTION", "reports"),
            fetch_timeout=float(os.getenv("SUMMARY_FETCH_TIMEOUT", "30")),
            max_concurrent_fetches=int(os.getenv("SUMMARY_MAX_CONCURRENT_FETCHES", "8")),
            report_join_cutoff=parse_join_cutoff(os.getenv("REPORT_JOIN_CUTOFF", "exact")),
        )

    def reports_path(self, group_doc_id: str) -> str:
        return f"{self.groups_collection}/{group_doc_id}/{self.reports_collection}"


def parse_join_cutoff(value: object) -> JoinDateCutoff:
    if isinstance(value, JoinDateCutoff):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower().replace("-", "_")
        try:
            return JoinDateCutoff(normalized)
        except ValueError:
            pass
    raise SummaryConfigError(f"invalid report join cutoff: {value}")
