"""
Reference-timezone clock.

Transactions are dated in a fixed named zone (Asia/Ulaanbaatar by default) so
the history groups the same way on every host, whatever the host's local
timezone is. The `tzdata` package ships the zone database, so this works on
hosts without a system zoneinfo directory too.

Formats:
  - date:      2026.10.19
  - time:      14:05
  - timestamp: 2026/10/19 14:05
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class ReferenceMoment:
    """One instant, expressed in the reference timezone."""

    epoch_ms: int
    date: str
    time: str
    timestamp: str


class ReferenceClock:
    """
    Produces ReferenceMoments for "now" in a fixed timezone.

    Args:
        tz_name: IANA zone name used for the date/time strings.
        now: Returns the current instant as an aware datetime. Tests inject
             a fixed function here; production uses the system clock.
    """

    def __init__(
        self,
        tz_name: str,
        now: Callable[[], datetime] | None = None,
    ):
        self.tz = ZoneInfo(tz_name)
        self._now = now or (lambda: datetime.now(timezone.utc))

    def now(self) -> ReferenceMoment:
        instant = self._now()
        if instant.tzinfo is None:
            # Naive datetimes are taken as UTC, never as the host's zone
            instant = instant.replace(tzinfo=timezone.utc)
        return self.moment(instant)

    def moment(self, instant: datetime) -> ReferenceMoment:
        local = instant.astimezone(self.tz)
        return ReferenceMoment(
            epoch_ms=int(instant.timestamp() * 1000),
            date=local.strftime("%Y.%m.%d"),
            time=local.strftime("%H:%M"),
            timestamp=local.strftime("%Y/%m/%d %H:%M"),
        )
