"""Russian-locale dates as printed by the portal.

Two shapes occur: "17 декабря 2018 г." and "17 декабря 2018 г. 18:09".
The marks list view appends the weekday in parentheses, which is ignored.
"""

import re
from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo

from src.dnevnik.errors import ParseError

DEFAULT_TZ = ZoneInfo("Europe/Moscow")

# Genitive case, as used after a day number
MONTHS: dict[str, int] = {
    "января": 1,
    "февраля": 2,
    "марта": 3,
    "апреля": 4,
    "мая": 5,
    "июня": 6,
    "июля": 7,
    "августа": 8,
    "сентября": 9,
    "октября": 10,
    "ноября": 11,
    "декабря": 12,
}
MONTH_NAMES: dict[int, str] = {number: name for name, number in MONTHS.items()}

_DATE_RE = re.compile(
    r"(?P<day>\S+)\s+(?P<month>\S+)\s+(?P<year>\S+?)\s*г\."
    r"(?:\s+(?P<hour>\d{1,2}):(?P<minute>\d{2}))?"
    r"(?:\s*\([^)]*\))?"
)


def parse_date(text: str, tz: tzinfo | None = None) -> datetime:
    """Parse a portal date into an aware datetime.

    Args:
        text: Date text, surrounding whitespace and line breaks allowed.
        tz: Zone to attach; defaults to Europe/Moscow.

    Raises:
        ParseError: Unknown month name, non-numeric day/year/time, or a
            date that does not exist in the calendar.
    """
    cleaned = " ".join(text.split())
    match = _DATE_RE.fullmatch(cleaned)
    if match is None:
        raise ParseError(f"not a portal date: {text!r}")

    month = MONTHS.get(match["month"].lower())
    if month is None:
        raise ParseError(f"unknown month name {match['month']!r} in {text!r}")

    day, year = match["day"], match["year"]
    if not (day.isdecimal() and year.isdecimal()):
        raise ParseError(f"non-numeric day or year in {text!r}")

    hour = int(match["hour"]) if match["hour"] else 0
    minute = int(match["minute"]) if match["minute"] else 0
    try:
        return datetime(int(year), month, int(day), hour, minute, tzinfo=tz or DEFAULT_TZ)
    except ValueError as e:
        raise ParseError(f"invalid date {text!r}: {e}") from e


def try_parse_date(text: str, tz: tzinfo | None = None) -> datetime | None:
    """parse_date() that maps failures to None ("date unknown")."""
    try:
        return parse_date(text, tz)
    except ParseError:
        return None


def format_date(value: datetime, *, with_time: bool = False) -> str:
    """Render a datetime the way the portal prints it."""
    text = f"{value.day} {MONTH_NAMES[value.month]} {value.year} г."
    if with_time:
        text += f" {value.hour:02d}:{value.minute:02d}"
    return text
