"""Fixed-interval polling for long-running CloudFormation operations."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import AbstractSet, Callable, Optional

from .models import COMPLETE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollResult:
    """Terminal status observed by :func:`wait_until_terminal`."""

    status: str
    attempts: int

    @property
    def succeeded(self) -> bool:
        return self.status == COMPLETE


def wait_until_terminal(
    operation_id: str,
    describe: Callable[[str], str],
    interval: float,
    *,
    failure_statuses: AbstractSet[str],
    sleep: Callable[[float], None] = time.sleep,
    on_poll: Optional[Callable[[str, int], None]] = None,
) -> PollResult:
    """Call ``describe`` until it reports ``COMPLETE`` or a failure status.

    Any other status sleeps for ``interval`` seconds and polls again. There is
    no timeout. Callers must treat an unsuccessful result as fatal.
    """

    attempts = 0
    while True:
        attempts += 1
        status = describe(operation_id)
        logger.debug("Poll %d of %s returned %s", attempts, operation_id, status)
        if on_poll is not None:
            on_poll(status, attempts)
        if status == COMPLETE or status in failure_statuses:
            return PollResult(status=status, attempts=attempts)
        sleep(interval)


__all__ = ["PollResult", "wait_until_terminal"]
