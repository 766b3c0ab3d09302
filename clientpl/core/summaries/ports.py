from __future__ import annotations

from typing import Protocol

from clientpl.core.summaries.models import Cell, StoredDocument


class DocumentStorePort(Protocol):
    async def list_collection(self, path: str) -> list[StoredDocument]:
        """Return every document in the collection at `path` (slash-separated)."""
        raise NotImplementedError


class LedgerSourcePort(Protocol):
    async def get_range(self, sheet_id: str, range_name: str) -> list[list[Cell]]:
        """Return all rows of the named range; an empty range yields []."""
        raise NotImplementedError
