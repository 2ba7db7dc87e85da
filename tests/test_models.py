"""Tests for the record models: validation rules and JSON round-trips."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from src.dnevnik.dates import DEFAULT_TZ
from src.dnevnik.models import (
    Context,
    Course,
    Credentials,
    Homework,
    ListType,
    Mark,
    MarkRange,
    Message,
    MessageDetail,
    Period,
    Region,
    School,
    Teacher,
)

DEC_17 = datetime(2018, 12, 17, tzinfo=DEFAULT_TZ)

RECORDS = [
    Context(school_id=83, class_id=4821, class_number=7, class_char="Б", edu_year_start=2018, edu_year_end=2019),
    Period(
        school_id=83, start_year=2018, end_year=2019, name="2 четверть", token="q2",
        start=datetime(2018, 11, 5, tzinfo=DEFAULT_TZ), end=datetime(2018, 12, 28, tzinfo=DEFAULT_TZ),
    ),
    Mark(user_id="ivanov", school_id=83, course_name="Математика", grades=[4, 5], date=DEC_17),
    Mark(user_id="ivanov", school_id=83, course_id=101, grades=[5], annual=True),
    Homework(school_id=83, class_id=4821, date=DEC_17, course_name="Математика", homework="Стр. 45"),
    Message(id=123456, user_id="ivanov", date=DEC_17, sender="Петрова А. С.", unread=True, subject="Собрание"),
    MessageDetail(id=123456, date=None, sender="Петрова А. С.", body="Текст"),
    Teacher(school_id=83, user_id="petrova", full_name="Петрова Анна Сергеевна", course_name="Математика"),
    Course(id=101, name="Математика"),
    Region(id=1, name="Ярославль г"),
    School(id=83, region_id=1, name="Средняя школа № 83", type="Общеобразовательные учреждения"),
]


class TestJsonRoundTrip:
    @pytest.mark.parametrize("record", RECORDS, ids=lambda r: type(r).__name__)
    def test_round_trip(self, record):
        """Every record shall survive a JSON round-trip unchanged."""
        restored = type(record).model_validate_json(record.model_dump_json())
        assert restored == record

    def test_dates_keep_offset(self):
        restored = Mark.model_validate_json(RECORDS[2].model_dump_json())
        assert restored.date.utcoffset() == DEC_17.utcoffset()


class TestMark:
    def test_annual_and_quarter_rejected(self):
        with pytest.raises(ValidationError):
            Mark(user_id="ivanov", school_id=83, quarter=2, annual=True)

    def test_defaults(self):
        mark = Mark(user_id="ivanov", school_id=83)
        assert mark.grades == [] and mark.date is None and mark.course_id is None


class TestPeriod:
    def test_start_after_end_rejected(self):
        with pytest.raises(ValidationError):
            Period(
                school_id=83, start_year=2018, end_year=2019, name="1 четверть", token="q1",
                start=datetime(2018, 10, 28, tzinfo=DEFAULT_TZ), end=datetime(2018, 9, 1, tzinfo=DEFAULT_TZ),
            )


class TestCourse:
    def test_hashable(self):
        assert len({Course(id=1, name="a"), Course(id=1, name="a")}) == 1

    def test_frozen(self):
        course = Course(id=1, name="a")
        with pytest.raises(ValidationError):
            course.name = "b"


class TestTokens:
    def test_academic_month_order(self):
        """Month ranges shall run September to August."""
        assert [m.value for m in MarkRange][:4] == ["month9", "month10", "month11", "month12"]
        assert list(MarkRange)[-1] is MarkRange.MONTH8
        assert len(MarkRange) == 12

    @pytest.mark.parametrize("month", range(1, 13))
    def test_for_month(self, month):
        assert MarkRange.for_month(month).value == f"month{month}"

    def test_list_type_segments(self):
        assert [t.value for t in ListType] == ["note", "list", "date"]

    def test_portal_username(self):
        assert Credentials(login="ivanov", password="x", school_id=83).portal_username == "ivanov@83"
