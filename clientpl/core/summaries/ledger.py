from __future__ import annotations

import logging
import math
import re
from typing import Iterable, Sequence

from clientpl.core.summaries.dates import normalize_entry_date, utc_midnight
from clientpl.core.summaries.models import Cell, Client, Group, LedgerRow, PerformanceTotals

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")


def match_ledger_rows(group: Group, ledger: Iterable[LedgerRow]) -> list[LedgerRow]:
    # Exact, case-sensitive comparison; "Alpha " and "alpha" are different groups.
    return [row for row in ledger if row.group_name == group.name]


def aggregate_performance(
    client: Client,
    groups: Iterable[Group],
    ledger: Sequence[LedgerRow],
) -> PerformanceTotals:
    """
    Sum P&L cells of the client's groups for rows dated on/after the join day.

    A group with no ledger rows under its name is reported in
    ``failed_groups``. Rows that exist but predate the join day, or carry an
    unreadable date, are dropped without marking the group failed.
    """
    if client.joined_at is None:
        raise ValueError(f"client {client.id} has no joining date")
    cutoff = utc_midnight(client.joined_at)

    pl_percentage_total = 0.0
    pl_abs_total = 0.0
    total_calls = 0
    failed_groups: list[str] = []

    for group in groups:
        rows = match_ledger_rows(group, ledger)
        if not rows:
            failed_groups.append(group.name)
            continue

        for row in rows:
            entry_date = normalize_entry_date(row.entry_date)
            if entry_date is None or entry_date < cutoff:
                continue
            pl_percentage_total += parse_cell_float(row.pl_percentage)
            pl_abs_total += parse_cell_float(row.pl_abs)
            total_calls += 1

    if failed_groups:
        logger.debug(
            "Ledger has no rows for client=%s groups=%s",
            client.id,
            failed_groups,
        )

    return PerformanceTotals(
        pl_percentage_total=pl_percentage_total,
        pl_abs_total=pl_abs_total,
        total_calls=total_calls,
        failed_groups=tuple(failed_groups),
    )


def parse_cell_float(value: Cell) -> float:
    """Read a numeric cell, falling back to 0.0 for anything unreadable."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        # Sheet exports carry units such as "2.5%"; only the leading number counts.
        match = _LEADING_NUMBER.match(value)
        if not match:
            return 0.0
        number = float(match.group(1))
    else:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number
