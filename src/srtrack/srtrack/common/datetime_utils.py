from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_CUTOFF_HOUR, DEFAULT_TIMEZONE


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimeAuthority:
    """Single source of "now" in the program's fixed timezone.

    Session dates and the cutoff check all go through here, so tests inject a
    fixed ``clock`` instead of patching ``datetime``.
    """

    def __init__(
        self,
        tz_name: str = DEFAULT_TIMEZONE,
        *,
        cutoff_hour: int = DEFAULT_CUTOFF_HOUR,
        tz_label: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._tz = ZoneInfo(tz_name)
        self._cutoff_hour = int(cutoff_hour)
        self._tz_label = tz_label
        self._clock = clock or utc_now

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    @property
    def tz_label(self) -> str:
        return self._tz_label or self.now().tzname() or str(self._tz)

    @property
    def cutoff_hour(self) -> int:
        return self._cutoff_hour

    def now(self) -> datetime:
        current = self._clock()
        if current.tzinfo is None:
            # Naive clocks are read as local program time.
            return current.replace(tzinfo=self._tz)
        return current.astimezone(self._tz)

    def localize(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc).astimezone(self._tz)
        return value.astimezone(self._tz)

    def today(self) -> date:
        return self.now().date()

    def today_iso(self) -> str:
        return self.today().isoformat()

    def is_past_cutoff(self, at: Optional[datetime] = None) -> bool:
        local = self.localize(at) if at is not None else self.now()
        return local.hour >= self._cutoff_hour

    def format_time(self, value: datetime) -> str:
        return self.localize(value).strftime("%H:%M:%S")
