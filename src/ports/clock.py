"""Time source for snapshot timestamps and TTL checks."""

from datetime import datetime
from typing import Protocol


class ClockPort(Protocol):
    def now_utc(self) -> datetime:
        """Timezone-aware current time; admin list snapshots are stamped with it."""
        ...
