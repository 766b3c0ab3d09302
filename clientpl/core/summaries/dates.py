"""
Date handling for ledger entries and document-store timestamps.

Ledger cells arrive in whatever shape the sheet holds: day-first ``D/M/Y``
text, ISO-like text, or native date values. Document-store timestamps arrive
as SDK datetimes or as ``{"_seconds": ..., "_nanoseconds": ...}`` wrappers.
Everything is normalised to timezone-aware UTC ``datetime`` instants so that
ledger entry dates and join dates compare on a single clock.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timezone
from typing import Mapping, Optional

import pandas as pd

_DAY_MONTH_YEAR = re.compile(r"^\s*(\d+)\s*/\s*(\d+)\s*/\s*(\d+)\s*$")
_ISO_LIKE = re.compile(r"^\s*\d{4}-\d{1,2}")


def normalize_entry_date(raw: object) -> Optional[datetime]:
    """Return the UTC instant for a ledger date cell, or None when unreadable."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, datetime):
        return _as_utc(raw)
    if isinstance(raw, date):
        return datetime.combine(raw, time.min, tzinfo=timezone.utc)
    if isinstance(raw, (int, float)):
        return _from_epoch_millis(float(raw))
    if isinstance(raw, str):
        if not raw.strip():
            return None
        match = _DAY_MONTH_YEAR.match(raw)
        if match:
            day, month, year = (int(part) for part in match.groups())
            try:
                return datetime(year, month, day, tzinfo=timezone.utc)
            except ValueError:
                return None
        return _parse_generic(raw)
    return None


def timestamp_instant(raw: object) -> datetime:
    """
    Read a document-store timestamp as a UTC instant with whole-second precision.

    Accepts the serialised wrapper (``_seconds`` / ``seconds`` keys), SDK
    datetime values, and plain epoch seconds.
    """
    if isinstance(raw, Mapping):
        seconds = raw.get("_seconds", raw.get("seconds"))
        if seconds is None or isinstance(seconds, bool):
            raise ValueError(f"timestamp mapping has no seconds: {raw!r}")
        return datetime.fromtimestamp(int(seconds), tz=timezone.utc)
    if isinstance(raw, datetime):
        return _as_utc(raw).replace(microsecond=0)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return datetime.fromtimestamp(int(raw), tz=timezone.utc)
    raise ValueError(f"unsupported timestamp value: {raw!r}")


def utc_midnight(instant: datetime) -> datetime:
    return _as_utc(instant).replace(hour=0, minute=0, second=0, microsecond=0)


def epoch_millis(instant: datetime) -> int:
    return int(_as_utc(instant).timestamp() * 1000)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _from_epoch_millis(millis: float) -> Optional[datetime]:
    if not math.isfinite(millis):
        return None
    try:
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _parse_generic(raw: str) -> Optional[datetime]:
    # pandas reads "now" and "today" as the current time; only ISO text is accepted.
    if not _ISO_LIKE.match(raw):
        return None
    parsed = pd.to_datetime(raw.strip(), utc=True, errors="coerce", format="ISO8601")
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()
