import argparse
import asyncio
import json
import os
import sys
from dataclasses import replace

from dotenv import load_dotenv
from loguru import logger

from clientpl.adapters.firestore.store import FirestoreDocumentStore
from clientpl.adapters.google.credentials import ServiceAccountConfig
from clientpl.adapters.sheets.google_sheets import GoogleSheetsLedgerSource
from clientpl.api.encoding import to_wire
from clientpl.cli.summary_table import SORT_KEYS, format_client_summary_table
from clientpl.core.summaries.config import SummaryConfig, parse_join_cutoff
from clientpl.core.summaries.models import SummaryRun
from clientpl.core.summaries.service import ClientSummaryService, SummaryFetchError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m clientpl.cli",
        description="Compute per-client P&L summaries from the ledger sheet and group reports",
    )
    parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format (default: table)",
    )
    parser.add_argument(
        "--sort-by",
        choices=SORT_KEYS,
        default="pl_abs",
        help="Table sort column (default: pl_abs)",
    )
    parser.add_argument(
        "--ascending",
        action="store_true",
        help="Sort the table ascending instead of descending",
    )
    parser.add_argument(
        "--report-cutoff",
        type=str,
        default=None,
        help="Override REPORT_JOIN_CUTOFF (exact or utc_midnight)",
    )
    return parser


def render_run(run: SummaryRun, *, output_format: str, sort_by: str, ascending: bool) -> str:
    if output_format == "json":
        return json.dumps(to_wire(run.to_payload()), indent=2)
    lines = format_client_summary_table(run.summaries, sort_by=sort_by, sort_desc=not ascending)
    if not lines:
        return "No clients to summarise."
    return "\n".join(lines)


async def _async_main(args: argparse.Namespace) -> int:
    try:
        config = SummaryConfig.from_env()
        if args.report_cutoff:
            config = replace(config, report_join_cutoff=parse_join_cutoff(args.report_cutoff))
        credentials = ServiceAccountConfig.from_env()
    except RuntimeError as exc:
        logger.error("Configuration error: {}", exc)
        return 2
    service = ClientSummaryService(
        FirestoreDocumentStore(config=credentials, retry_deadline=config.fetch_timeout),
        GoogleSheetsLedgerSource(config=credentials, retry_deadline=config.fetch_timeout),
        config,
    )
    logger.info(
        "Computing summaries sheet={} report_cutoff={}",
        config.sheet_name,
        config.report_join_cutoff.value,
    )
    try:
        run = await service.compute_all()
    except SummaryFetchError as exc:
        logger.error("Summary run failed: {}", exc)
        return 1
    print(render_run(run, output_format=args.format, sort_by=args.sort_by, ascending=args.ascending))
    return 0


def main() -> None:
    load_dotenv()
    # Log to stderr so JSON output on stdout stays clean.
    logger.remove()
    logger.add(sys.stderr, level=os.getenv("LOG_LEVEL", "INFO"))
    args = _build_parser().parse_args()
    raise SystemExit(asyncio.run(_async_main(args)))


if __name__ == "__main__":
    main()
