"""Virtual day boundaries in the fixed reference timezone.

"Today" runs from the night-owl cutoff (04:00 by default) through 03:59 of the
next calendar day, so late-night entries land on the day that is ending.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

REFERENCE_OFFSET_MINUTES = 8 * 60
NIGHT_OWL_CUTOFF_HOUR = 4
DAY_KEY_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class WallClock:
    hour: int
    minute: int
    date: date

    @property
    def minute_of_day(self) -> int:
        return self.hour * 60 + self.minute


@dataclass(frozen=True)
class DayWindow:
    today_key: str
    tomorrow_key: str
    today_label: str
    tomorrow_label: str

    def resolve(self, day: str) -> str:
        """Map "today"/"tomorrow" to a day key; any other value passes through."""
        if day == "today":
            return self.today_key
        if day == "tomorrow":
            return self.tomorrow_key
        return day


def _as_utc(instant: datetime) -> datetime:
    # Naive instants are treated as UTC
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def local_wall_clock(
    instant: datetime, offset_minutes: int = REFERENCE_OFFSET_MINUTES
) -> WallClock:
    """Return the wall-clock reading of ``instant`` at a fixed UTC offset."""
    local = _as_utc(instant).astimezone(timezone(timedelta(minutes=offset_minutes)))
    return WallClock(hour=local.hour, minute=local.minute, date=local.date())


def day_key(day: date) -> str:
    return day.strftime(DAY_KEY_FORMAT)


def day_label(day: date) -> str:
    return f"{day.strftime('%A, %B')} {day.day}"


def resolve_day_window(
    now: datetime,
    reference_offset_minutes: int = REFERENCE_OFFSET_MINUTES,
    night_owl_cutoff_hour: int = NIGHT_OWL_CUTOFF_HOUR,
) -> DayWindow:
    clock = local_wall_clock(now, reference_offset_minutes)
    today = clock.date
    if clock.hour < night_owl_cutoff_hour:
        today = today - timedelta(days=1)
    tomorrow = today + timedelta(days=1)
    return DayWindow(
        today_key=day_key(today),
        tomorrow_key=day_key(tomorrow),
        today_label=day_label(today),
        tomorrow_label=day_label(tomorrow),
    )
