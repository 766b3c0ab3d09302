from __future__ import annotations

import math
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any


def to_wire(value: Any) -> Any:
    """Make a summary payload JSON-safe, keeping the document store's timestamp shape."""
    if isinstance(value, datetime):
        return _format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(key): to_wire(val) for key, val in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_wire(item) for item in value]
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    path = getattr(value, "path", None)
    if isinstance(path, str):
        # Document references serialise to their path.
        return path
    return repr(value)


def _format_timestamp(value: datetime) -> dict[str, int]:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    seconds = math.floor(value.timestamp())
    nanos = getattr(value, "nanosecond", None)
    if not isinstance(nanos, int):
        nanos = value.microsecond * 1000
    return {"_seconds": seconds, "_nanoseconds": nanos}
