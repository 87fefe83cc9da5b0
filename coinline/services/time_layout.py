"""Reference-date time layouts.

Layouts are written as the way the reference instant
``Mon Jan 2 15:04:05 MST 2006`` would be displayed, e.g. ``Mon Jan _2 2006``
or ``2006-01-02 15:04``. Anything that is not a recognised token is copied
through literally.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo

ISO_ZULU = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z")

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# checked in order at each position; longer tokens sharing a lead character come first
_ZONE_TOKENS = ("070000", "07:00:00", "0700", "07:00", "07")


def parse_iso_zulu(value: str) -> datetime | None:
    """Parse ``YYYY-MM-DDTHH:MM:SSZ`` as a UTC instant, or return None."""
    if not ISO_ZULU.fullmatch(value or ""):
        return None
    try:
        parsed = datetime.strptime(value, "%Y-%m-%dT%H:%M:%SZ")
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)


def _next_token(layout: str, i: int) -> tuple[str, int] | None:
    rest = layout[i:]
    c = rest[0]

    if c == "J":
        if rest.startswith("January"):
            return "January", 7
        if rest.startswith("Jan"):
            return "Jan", 3
    elif c == "M":
        if rest.startswith("Monday"):
            return "Monday", 6
        if rest.startswith("Mon"):
            return "Mon", 3
        if rest.startswith("MST"):
            return "MST", 3
    elif c == "0":
        if len(rest) >= 2 and "1" <= rest[1] <= "6":
            return rest[:2], 2
        if rest.startswith("002"):
            return "002", 3
    elif c == "1":
        if rest.startswith("15"):
            return "15", 2
        return "1", 1
    elif c == "2":
        if rest.startswith("2006"):
            return "2006", 4
        return "2", 1
    elif c == "_":
        if rest.startswith("_2") and not rest.startswith("_2006"):
            return "_2", 2
        if rest.startswith("__2"):
            return "__2", 3
    elif c in "345":
        return c, 1
    elif c == "P" and rest.startswith("PM"):
        return "PM", 2
    elif c == "p" and rest.startswith("pm"):
        return "pm", 2
    elif c in "-Z":
        for zone in _ZONE_TOKENS:
            if rest[1:].startswith(zone):
                return c + zone, len(zone) + 1
    elif c in ".," and len(rest) >= 2 and rest[1] in "09":
        j = 1
        while j < len(rest) and rest[j] == rest[1]:
            j += 1
        if j == len(rest) or not rest[j].isdigit():
            return rest[:j], j
    return None


def _zone_offset(instant: datetime, token: str) -> str:
    offset = instant.utcoffset() or timedelta(0)
    if token[0] == "Z" and offset == timedelta(0):
        return "Z"

    seconds = int(offset.total_seconds())
    sign = "-" if seconds < 0 else "+"
    hours, remainder = divmod(abs(seconds), 3600)
    minutes, secs = divmod(remainder, 60)

    body = token[1:]
    if body == "07":
        return f"{sign}{hours:02d}"
    if body == "0700":
        return f"{sign}{hours:02d}{minutes:02d}"
    if body == "07:00":
        return f"{sign}{hours:02d}:{minutes:02d}"
    if body == "070000":
        return f"{sign}{hours:02d}{minutes:02d}{secs:02d}"
    return f"{sign}{hours:02d}:{minutes:02d}:{secs:02d}"


def _fraction(instant: datetime, token: str) -> str:
    digits = f"{instant.microsecond * 1000:09d}"[: len(token) - 1]
    if token[1] == "0":
        return token[0] + digits
    digits = digits.rstrip("0")
    return token[0] + digits if digits else ""


def _render_token(instant: datetime, token: str) -> str:
    hour12 = instant.hour % 12 or 12
    yday = instant.timetuple().tm_yday

    if token == "January":
        return _MONTHS[instant.month - 1]
    if token == "Jan":
        return _MONTHS[instant.month - 1][:3]
    if token == "Monday":
        return _WEEKDAYS[instant.weekday()]
    if token == "Mon":
        return _WEEKDAYS[instant.weekday()][:3]
    if token == "MST":
        return instant.tzname() or "UTC"
    if token == "2006":
        return f"{instant.year:04d}"
    if token == "06":
        return f"{instant.year % 100:02d}"
    if token == "01":
        return f"{instant.month:02d}"
    if token == "1":
        return str(instant.month)
    if token == "02":
        return f"{instant.day:02d}"
    if token == "2":
        return str(instant.day)
    if token == "_2":
        return f"{instant.day:>2d}"
    if token == "002":
        return f"{yday:03d}"
    if token == "__2":
        return f"{yday:>3d}"
    if token == "15":
        return f"{instant.hour:02d}"
    if token == "03":
        return f"{hour12:02d}"
    if token == "3":
        return str(hour12)
    if token == "04":
        return f"{instant.minute:02d}"
    if token == "4":
        return str(instant.minute)
    if token == "05":
        return f"{instant.second:02d}"
    if token == "5":
        return str(instant.second)
    if token == "PM":
        return "PM" if instant.hour >= 12 else "AM"
    if token == "pm":
        return "pm" if instant.hour >= 12 else "am"
    if token[0] in "-Z":
        return _zone_offset(instant, token)
    return _fraction(instant, token)


def render_layout(instant: datetime, layout: str, tz: tzinfo | None = None) -> str:
    """Render ``instant`` through a reference-date ``layout``."""
    if tz is not None:
        instant = instant.astimezone(tz)
    elif instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)

    out: list[str] = []
    literal_start = 0
    i = 0
    while i < len(layout):
        found = _next_token(layout, i)
        if found is None:
            i += 1
            continue
        token, length = found
        out.append(layout[literal_start:i])
        out.append(_render_token(instant, token))
        i += length
        literal_start = i
    out.append(layout[literal_start:])
    return "".join(out)


def format_timestamp(value: str, layout: str, tz: tzinfo | None = None) -> str:
    """Render an ISO-8601 zulu ``value`` through ``layout``; unparseable input is returned as is."""
    instant = parse_iso_zulu(value)
    if instant is None:
        return value
    return render_layout(instant, layout, tz)
