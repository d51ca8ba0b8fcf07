from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BuildNumberGenerator:
    """Generate sortable build numbers such as ``20171005194031123456000``."""

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        self.clock = clock

    def generate(self) -> str:
        now = self.clock().astimezone(timezone.utc)
        return now.strftime("%Y%m%d%H%M%S") + f"{now.microsecond * 1000:09d}"
