from __future__ import annotations

import re

# Forces unparseable labels to sort after every real time
UNPARSEABLE_TIME = 99999

_MERIDIEM = re.compile(r"AM|PM", re.IGNORECASE)


def _to_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _split_hour_minute(label: str) -> tuple[int, int] | None:
    parts = label.split(":")
    if len(parts) < 2:
        return None
    hours, minutes = _to_int(parts[0]), _to_int(parts[1])
    if hours is None or minutes is None:
        return None
    return hours, minutes


def parse_time_label(label: str | None) -> int:
    """Convert a 24h "HH:MM" or 12h "HH:MM AM/PM" label to a minute of day.

    Hours and minutes are not range checked: "25:99" yields 1599. Anything
    that is not two integers returns ``UNPARSEABLE_TIME``.
    """
    if not label:
        return UNPARSEABLE_TIME

    if _MERIDIEM.search(label):
        pieces = label.split()
        if len(pieces) < 2:
            return UNPARSEABLE_TIME
        clock, modifier = pieces[0], pieces[1].upper()
        parsed = _split_hour_minute(clock)
        if parsed is None:
            return UNPARSEABLE_TIME
        hours, minutes = parsed
        if hours == 12 and modifier == "AM":
            hours = 0
        if hours != 12 and modifier == "PM":
            hours += 12
        return hours * 60 + minutes

    parsed = _split_hour_minute(label)
    if parsed is None:
        return UNPARSEABLE_TIME
    hours, minutes = parsed
    return hours * 60 + minutes


def format_minutes(minute_of_day: int) -> str:
    """Format a minute of day as a zero-padded 24h "HH:MM" label."""
    hours, minutes = divmod(minute_of_day, 60)
    return f"{hours:02d}:{minutes:02d}"
