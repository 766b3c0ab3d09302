from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence, Union

from clientpl.core.summaries.dates import timestamp_instant

Cell = Union[str, int, float, None]

GROUP_NAME_COLUMN = 1
ENTRY_DATE_COLUMN = 2
PL_PERCENTAGE_COLUMN = 13
PL_ABS_COLUMN = 14


@dataclass(frozen=True)
class StoredDocument:
    id: str
    fields: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Client:
    id: str
    role: Optional[str]
    joined_at: Optional[datetime]
    group_ids: Optional[tuple[str, ...]]
    fields: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_document(cls, doc: StoredDocument) -> "Client":
        raw_groups = doc.fields.get("groups_client_is_part_of")
        group_ids: Optional[tuple[str, ...]] = None
        if raw_groups is not None:
            if isinstance(raw_groups, str):
                group_ids = (raw_groups,)
            else:
                group_ids = tuple(raw_groups)
        role = doc.fields.get("role")
        return cls(
            id=doc.id,
            role=role if isinstance(role, str) else None,
            joined_at=_optional_instant(doc.fields.get("joining_date")),
            group_ids=group_ids,
            fields=dict(doc.fields),
        )

    @property
    def is_aggregated(self) -> bool:
        """Only plain users with a membership list get a summary."""
        return self.role == "user" and self.group_ids is not None

    def to_payload(self) -> dict[str, Any]:
        return {"id": self.id, **self.fields}


@dataclass(frozen=True)
class Group:
    id: str
    group_id: Optional[str]
    name: Optional[str]
    fields: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_document(cls, doc: StoredDocument) -> "Group":
        return cls(
            id=doc.id,
            group_id=doc.fields.get("groupID"),
            name=doc.fields.get("groupName"),
            fields=dict(doc.fields),
        )

    def to_payload(self) -> dict[str, Any]:
        return {"id": self.id, **self.fields}


@dataclass(frozen=True)
class LedgerRow:
    group_name: Cell
    entry_date: Cell
    pl_percentage: Cell
    pl_abs: Cell

    @classmethod
    def from_cells(cls, cells: Sequence[Cell]) -> "LedgerRow":
        return cls(
            group_name=_cell_at(cells, GROUP_NAME_COLUMN),
            entry_date=_cell_at(cells, ENTRY_DATE_COLUMN),
            pl_percentage=_cell_at(cells, PL_PERCENTAGE_COLUMN),
            pl_abs=_cell_at(cells, PL_ABS_COLUMN),
        )


@dataclass(frozen=True)
class ReportDocument:
    id: str
    timestamp: Optional[datetime]

    @classmethod
    def from_document(cls, doc: StoredDocument) -> "ReportDocument":
        return cls(id=doc.id, timestamp=_optional_instant(doc.fields.get("timestamp")))


@dataclass(frozen=True)
class PerformanceTotals:
    pl_percentage_total: float = 0.0
    pl_abs_total: float = 0.0
    total_calls: int = 0
    failed_groups: tuple[str, ...] = ()


@dataclass(frozen=True)
class ReportFetchResult:
    group: Group
    documents: tuple[ReportDocument, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ClientSummary:
    client: Client
    total_pl_percentage: float
    total_pl_abs: float
    total_calls: int
    total_reports: int
    failed_groups: tuple[str, ...]

    def to_payload(self) -> dict[str, Any]:
        payload = self.client.to_payload()
        payload.update(
            {
                "totalPLPercentage": self.total_pl_percentage,
                "totalPLAbs": self.total_pl_abs,
                "totalCalls": self.total_calls,
                "totalReports": self.total_reports,
                "failedGroups": list(self.failed_groups),
            }
        )
        return payload


@dataclass(frozen=True)
class SummaryRun:
    users: tuple[Union[ClientSummary, Client], ...]
    groups: tuple[Group, ...]

    @property
    def summaries(self) -> list[ClientSummary]:
        return [item for item in self.users if isinstance(item, ClientSummary)]

    def to_payload(self) -> dict[str, Any]:
        return {
            "users": [item.to_payload() for item in self.users],
            "groups": [group.to_payload() for group in self.groups],
        }


def _cell_at(cells: Sequence[Cell], index: int) -> Cell:
    if index < len(cells):
        return cells[index]
    return None


def _optional_instant(raw: object) -> Optional[datetime]:
    if raw is None:
        return None
    try:
        return timestamp_instant(raw)
    except (TypeError, ValueError, OverflowError, OSError):
        return None
