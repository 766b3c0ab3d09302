from __future__ import annotations

import logging
from typing import Optional

from tenacity import (
    Retrying,
    before_sleep_log,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)

logger = logging.getLogger(__name__)


def google_retrying(attempts: int, wait: float, deadline: Optional[float] = None) -> Retrying:
    """
    Bounded exponential-backoff retry for blocking Google SDK calls.

    ``deadline`` caps the total time spent retrying. The caller's async timeout
    cannot stop a worker thread, so the retry loop has to stop on its own.
    """
    stop = stop_after_attempt(max(attempts, 1))
    if deadline is not None:
        stop = stop | stop_after_delay(deadline)
    return Retrying(
        stop=stop,
        wait=wait_exponential(multiplier=wait, max=10),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
