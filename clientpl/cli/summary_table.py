from __future__ import annotations

import math
from typing import Optional, Sequence

from clientpl.core.summaries.models import ClientSummary

SORT_KEYS = ("pl_abs", "pl_pct", "calls", "reports", "client")
HEADERS = ("client", "p&l %", "p&l", "calls", "reports", "failed groups")
_NUMERIC_COLUMNS = frozenset({1, 2, 3, 4})


def format_client_summary_table(
    summaries: list[ClientSummary],
    *,
    sort_by: str = "pl_abs",
    sort_desc: bool = True,
) -> list[str]:
    if not summaries:
        return []
    if sort_by not in SORT_KEYS:
        raise ValueError(f"sort_by must be one of {', '.join(SORT_KEYS)}")

    rows = sorted(summaries, key=lambda item: _sort_value(item, sort_by), reverse=sort_desc)

    formatted_rows: list[list[str]] = []
    total_pct = 0.0
    total_abs = 0.0
    total_calls = 0
    total_reports = 0
    for summary in rows:
        total_pct += summary.total_pl_percentage
        total_abs += summary.total_pl_abs
        total_calls += summary.total_calls
        total_reports += summary.total_reports
        formatted_rows.append(
            [
                _client_label(summary),
                _format_number(summary.total_pl_percentage),
                _format_number(summary.total_pl_abs),
                str(summary.total_calls),
                str(summary.total_reports),
                ", ".join(str(name) for name in summary.failed_groups) or "-",
            ]
        )

    formatted_rows.append(
        [
            "TOTAL",
            _format_number(total_pct),
            _format_number(total_abs),
            str(total_calls),
            str(total_reports),
            "-",
        ]
    )
    return _render_lines(formatted_rows)


def _sort_value(summary: ClientSummary, sort_by: str) -> object:
    if sort_by == "pl_pct":
        return (summary.total_pl_percentage, summary.client.id)
    if sort_by == "calls":
        return (summary.total_calls, summary.client.id)
    if sort_by == "reports":
        return (summary.total_reports, summary.client.id)
    if sort_by == "client":
        return (_client_label(summary).lower(), summary.client.id)
    return (summary.total_pl_abs, summary.client.id)


def _client_label(summary: ClientSummary) -> str:
    name = summary.client.fields.get("name") or summary.client.fields.get("email")
    return str(name) if name else summary.client.id


def _format_number(value: Optional[float], *, precision: int = 4) -> str:
    if value is None or not math.isfinite(value):
        return "-"
    formatted = f"{float(value):.{precision}f}"
    formatted = formatted.rstrip("0").rstrip(".")
    if formatted in ("", "-0"):
        return "0"
    return formatted


def _render_lines(rows: list[list[str]]) -> list[str]:
    widths = [
        max(len(header), *(len(row[idx]) for row in rows)) for idx, header in enumerate(HEADERS)
    ]
    lines = [_join_cells(HEADERS, widths), "-+-".join("-" * width for width in widths)]
    lines.extend(_join_cells(row, widths) for row in rows)
    return lines


def _join_cells(values: Sequence[str], widths: list[int]) -> str:
    return " | ".join(
        value.rjust(width) if idx in _NUMERIC_COLUMNS else value.ljust(width)
        for idx, (value, width) in enumerate(zip(values, widths))
    )
