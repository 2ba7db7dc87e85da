"""Pydantic models for portal records.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Every record round-trips through model_dump_json()/model_validate_json().
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class ListType(str, Enum):
    """Marks page layout. The value is the URL path segment."""

    NOTE = "note"  # student diary, week by week
    LIST = "list"  # one row of grades per course
    DATE = "date"  # by date, not supported by the extractor


class MarkRange(str, Enum):
    """Academic months in school-year order. The value is the URL path segment."""

    MONTH9 = "month9"
    MONTH10 = "month10"
    MONTH11 = "month11"
    MONTH12 = "month12"
    MONTH1 = "month1"
    MONTH2 = "month2"
    MONTH3 = "month3"
    MONTH4 = "month4"
    MONTH5 = "month5"
    MONTH6 = "month6"
    MONTH7 = "month7"
    MONTH8 = "month8"

    @classmethod
    def for_month(cls, month: int) -> "MarkRange":
        """Range token for a calendar month number (1-12)."""
        return cls(f"month{month}")


class Credentials(BaseModel):
    """Portal login data. The username sent to the portal is login@school_id."""

    login: str
    password: str
    school_id: int

    @property
    def portal_username(self) -> str:
        return f"{self.login}@{self.school_id}"


class Context(BaseModel):
    """School/class/academic-year scope derived from the dashboard page.

    Only exists after a successful derivation; there is no empty Context.
    """

    school_id: int
    class_id: int  # from body onload="loadSubjects('/ajax/subj/<id>', true)"
    class_number: int  # 7 in 'Учащийся (7 "Б")'
    class_char: str  # "Б"
    edu_year_start: int  # 2018 in "2018-2019 учебный год"
    edu_year_end: int


class Period(BaseModel):
    """Academic sub-period (quarter, trimester, half-year) from the marks page."""

    school_id: int
    start_year: int
    end_year: int
    name: str  # option text, e.g. "2 четверть"
    token: str  # option value, used as a URL path segment
    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_bounds(self) -> "Period":
        if self.start > self.end:
            raise ValueError(f"period {self.name!r} starts after it ends")
        return self

    def is_current(self, now: datetime) -> bool:
        return self.start <= now < self.end


class Mark(BaseModel):
    """One lesson row (Note shape) or one grade (List/final shapes)."""

    user_id: str
    school_id: int
    course_id: int | None = None
    course_name: str = ""
    subject: str = ""  # lesson topic, "Тема: " prefix stripped
    homework: str = ""
    grades: list[int] = []  # 1-5 scale, several per lesson allowed
    day_of_week: str = ""
    date: datetime | None = None  # None when the page date could not be parsed
    start_year: int | None = None
    end_year: int | None = None
    quarter: int | None = None  # final marks only
    annual: bool = False  # final marks only

    @model_validator(mode="after")
    def _check_final_kind(self) -> "Mark":
        if self.annual and self.quarter is not None:
            raise ValueError("a mark cannot be both annual and quarterly")
        return self


class Homework(BaseModel):
    """One row of the homework list."""

    school_id: int
    class_id: int | None = None
    date: datetime | None = None
    day_of_week: str = ""
    course_id: int | None = None
    course_name: str = ""
    homework: str = ""
    subject: str = ""


class Message(BaseModel):
    """Inbox row. The body is fetched separately as MessageDetail."""

    id: int
    user_id: str
    date: datetime | None = None
    sender: str = ""
    unread: bool = False
    subject: str = ""


class MessageDetail(BaseModel):
    """Full message fetched by id."""

    id: int
    date: datetime | None = None
    sender: str = ""
    body: str = ""


class MessagesCount(BaseModel):
    unread: int = 0
    total: int = 0


class Teacher(BaseModel):
    """Row of the class teachers list."""

    school_id: int
    user_id: str  # contact id from the mailto link, without @school suffix
    full_name: str = ""
    course_id: int | None = None
    course_name: str = ""


class Course(BaseModel):
    """Catalog entry. Frozen so equal (id, name) pairs hash together."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class Region(BaseModel):
    id: int
    name: str


class School(BaseModel):
    id: int
    region_id: int
    name: str
    type: str = ""  # optgroup label, e.g. "Общеобразовательные учреждения"


class PageInfo(BaseModel):
    """Pager state of a list page."""

    has_pages: bool = False
    total_pages: int = 1
    has_next: bool = False
