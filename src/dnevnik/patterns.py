"""Parsers for values the portal hides in free text and inline scripts.

Each parser works on a plain string (an attribute value or element text)
and knows nothing about HTML traversal. Patterns use named groups so the
captured parts are explicit.
"""

import re

from src.dnevnik.errors import ParseError

LOAD_SUBJECTS_PREFIX = "loadSubjects('/ajax/subj/"
LOAD_SUBJECTS_SUFFIX = "', true)"
MAILTO_PREFIX = "/messages/new/?to="

_ROLE_RE = re.compile(r'Учащийся\s*\(\s*(?P<number>\d+)\s*"(?P<char>[^"]+)"\s*\)')
_EDU_YEAR_RE = re.compile(r"(?P<start>\d{4})\s*-\s*(?P<end>\d{4})\s+учебный год")
_PERIOD_RANGE_RE = re.compile(
    r"(?P<start>\d{1,2}\s+[^\W\d_]+\s+\d{4}\s*г\.)\s+по\s+"
    r"(?P<end>\d{1,2}\s+[^\W\d_]+\s+\d{4}\s*г\.)"
)
# showMarkInfo('17 декабря 2018 г. (понедельник)', ...)
_MARK_INFO_RE = re.compile(
    r"showMarkInfo\(\s*'(?P<date>\d{1,2}\s+[^\W\d_]+\s+\d{4}\s*г\.)"
)
# showMarkItogInfo('2 четверть', ...)
_MARK_ITOG_RE = re.compile(r"showMarkItogInfo\(\s*'(?P<period>[^']*)'")
_NUMBER_RE = re.compile(r"\d+")


def parse_class_role(text: str) -> tuple[int, str]:
    """Class number and letter from the role line, e.g. 'Учащийся (7 "Б")'."""
    match = _ROLE_RE.search(text)
    if match is None:
        raise ParseError(f"no student role in {text.strip()!r}")
    return int(match["number"]), match["char"]


def parse_class_id(onload: str) -> int:
    """Class id from onload="loadSubjects('/ajax/subj/4821', true)"."""
    value = onload.strip().removeprefix(LOAD_SUBJECTS_PREFIX).removesuffix(LOAD_SUBJECTS_SUFFIX)
    if not value.isdecimal():
        raise ParseError(f"class id is not numeric in {onload!r}")
    return int(value)


def parse_edu_year(text: str) -> tuple[int, int]:
    """Academic year bounds from "2018-2019 учебный год"."""
    match = _EDU_YEAR_RE.search(text)
    if match is None:
        raise ParseError(f"no academic year in {text.strip()!r}")
    return int(match["start"]), int(match["end"])


def parse_period_range(text: str) -> tuple[str, str]:
    """Start and end date texts from "с 1 сентября 2018 г. по 28 октября 2018 г."."""
    match = _PERIOD_RANGE_RE.search(" ".join(text.split()))
    if match is None:
        raise ParseError(f"no period range in {text.strip()!r}")
    return match["start"], match["end"]


def parse_mark_info_date(onclick: str) -> str | None:
    """Date text passed to showMarkInfo(); None when the call does not match."""
    match = _MARK_INFO_RE.search(" ".join(onclick.split()))
    return match["date"] if match else None


def parse_final_period(onclick: str) -> int | None:
    """Quarter number from showMarkItogInfo('2 четверть', ...), if any."""
    match = _MARK_ITOG_RE.search(onclick)
    if match is None:
        return None
    number = _NUMBER_RE.search(match["period"])
    return int(number.group()) if number else None


def parse_mailto_contact(href: str, school_id: int) -> str:
    """Teacher contact id from "/messages/new/?to=<id>@<school_id>"."""
    if not href.startswith(MAILTO_PREFIX):
        raise ParseError(f"unexpected mailto link {href!r}")
    return href.removeprefix(MAILTO_PREFIX).removesuffix(f"@{school_id}")


def split_day_header(text: str) -> tuple[str, str]:
    """Split "Понедельник (17 декабря 2018 г.)" into weekday and date text."""
    head, sep, tail = text.rpartition(" (")
    if not sep:
        raise ParseError(f"no date in day header {text.strip()!r}")
    return head, tail.removesuffix(")")
