"""Retry policy for content uploads."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from artifactory_resource.exceptions import FlakyServerResponseError, TransientTransferError

log = logging.getLogger(__name__)

T = TypeVar("T")

FLAKY_STATUS_CODES = frozenset({400, 404})


def is_retryable(error: BaseException) -> bool:
    """Socket failures and the statuses the server returns for transient conditions."""
    return isinstance(error, (TransientTransferError, FlakyServerResponseError))


@dataclass
class RetryPolicy:
    """Bounded retry with a fixed delay between attempts.

    ``sleep`` is injectable so tests can run without waiting. Anything raised by
    ``sleep`` (an interrupt, for instance) stops retrying and propagates.
    """

    max_attempts: int = 3
    delay: float = 5.0
    retryable: Callable[[BaseException], bool] = is_retryable
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay < 0:
            raise ValueError("delay must not be negative")

    def run(self, operation: Callable[[], T], description: str = "operation") -> T:
        attempt = 1
        while True:
            try:
                return operation()
            except Exception as exc:
                if not self.retryable(exc) or attempt >= self.max_attempts:
                    raise
                log.warning(
                    "Attempt %d/%d of %s failed (%s), retrying in %.1fs",
                    attempt,
                    self.max_attempts,
                    description,
                    exc,
                    self.delay,
                )
            self.sleep(self.delay)
            attempt += 1
