from __future__ import annotations

import json

import pytest

from clientpl.cli.__main__ import render_run
from clientpl.cli.summary_table import format_client_summary_table
from clientpl.core.summaries.models import Client, ClientSummary, SummaryRun


def _summary(
    client_id: str,
    *,
    pct: float = 0.0,
    abs_pl: float = 0.0,
    calls: int = 0,
    reports: int = 0,
    failed: tuple[str, ...] = (),
    name: str | None = None,
) -> ClientSummary:
    fields = {"name": name} if name else {}
    return ClientSummary(
        client=Client(id=client_id, role="user", joined_at=None, group_ids=(), fields=fields),
        total_pl_percentage=pct,
        total_pl_abs=abs_pl,
        total_calls=calls,
        total_reports=reports,
        failed_groups=failed,
    )


def test_table_sorts_by_absolute_pnl_and_totals() -> None:
    lines = format_client_summary_table(
        [
            _summary("u1", pct=1.5, abs_pl=-20.0, calls=2, reports=1, name="Alice"),
            _summary("u2", pct=2.25, abs_pl=120.5, calls=3, reports=4, failed=("G2", "G9")),
        ]
    )

    assert "p&l %" in lines[0]
    assert "failed groups" in lines[0]
    assert lines[2].startswith("u2")
    assert "G2, G9" in lines[2]
    assert lines[3].startswith("Alice")
    assert lines[4].startswith("TOTAL")
    assert "3.75" in lines[4]
    assert "100.5" in lines[4]
    assert " 5 " in lines[4]


def test_table_sort_options() -> None:
    lines = format_client_summary_table(
        [
            _summary("u1", calls=5),
            _summary("u2", calls=1),
            _summary("u3", calls=3),
        ],
        sort_by="calls",
        sort_desc=False,
    )

    assert [line.split(" ")[0] for line in lines[2:5]] == ["u2", "u3", "u1"]


def test_table_rejects_unknown_sort_key() -> None:
    with pytest.raises(ValueError):
        format_client_summary_table([_summary("u1")], sort_by="volume")


def test_empty_table() -> None:
    assert format_client_summary_table([]) == []


def test_render_run_formats() -> None:
    run = SummaryRun(
        users=(
            _summary("u1", pct=1.0, abs_pl=10.0, calls=1),
            Client(id="root", role="admin", joined_at=None, group_ids=None, fields={"role": "admin"}),
        ),
        groups=(),
    )

    as_json = json.loads(render_run(run, output_format="json", sort_by="pl_abs", ascending=False))
    as_table = render_run(run, output_format="table", sort_by="pl_abs", ascending=False)
    empty = render_run(SummaryRun(users=(), groups=()), output_format="table", sort_by="pl_abs", ascending=False)

    assert as_json["users"][0]["totalCalls"] == 1
    assert as_json["users"][1] == {"id": "root", "role": "admin"}
    assert "root" not in as_table
    assert "TOTAL" in as_table
    assert empty == "No clients to summarise."


def test_numeric_columns_are_right_aligned() -> None:
    lines = format_client_summary_table([_summary("u1", abs_pl=7.0, calls=12)])

    header_cells = lines[0].split(" | ")
    row_cells = lines[2].split(" | ")
    assert header_cells[0] == "client"
    assert row_cells[0] == "u1    "
    assert row_cells[2] == "  7"
    assert row_cells[3] == "   12"
    assert len(lines[2]) == len(lines[0])
