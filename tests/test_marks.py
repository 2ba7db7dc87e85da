"""Tests for MarksPage (note/list layouts) and FinalMarksPage."""

from datetime import timedelta

import pytest

from src.dnevnik.errors import DerivationError, TransportError
from src.dnevnik.models import Course, ListType, MarkRange
from src.dnevnik.pages.marks import FinalMarksPage, MarksPage

NOTE_HTML = """
<html><body>
<div id="content"><h3>Оценки за период
  с 17 декабря 2018 г. по 23 декабря 2018 г.</h3>
<div id="marks">
  <div class="week">
    <div class="dayofweek">
      <div class="weekday"><h3>Понедельник (17 декабря 2018 г.)</h3></div>
      <table>
        <tbody>
          <tr title="Тема: Обыкновенные дроби">
            <td>Математика</td>
            <td> Стр. 45, № 3 </td>
            <td class="col-mark"><span class="mark">4</span><span class="mark">5</span></td>
          </tr>
        </tbody>
      </table>
    </div>
  </div>
</div>
</div>
</body></html>
"""

NOTE_TWO_WEEKS_HTML = """
<div id="marks">
  <div class="week">
    <div class="dayofweek">
      <div class="weekday"><h3>Пятница (21 декабря 2018 г.)</h3></div>
      <table>
        <tr><th>Предмет</th><th>Задание</th><th>Оценки</th></tr>
        <tr title="Тема: Причастие">
          <td>Русский язык</td><td>Упр. 112</td>
          <td class="col-mark"><span class="mark">н</span></td>
        </tr>
        <tr>
          <td>Физкультура</td><td></td><td class="col-mark"></td>
        </tr>
      </table>
    </div>
    <div class="dayofweek">
      <div class="weekday"><h3>Суббота</h3></div>
      <table><tr title="Тема: Обзор"><td>История</td><td></td>
        <td class="col-mark"><span class="mark">3</span></td></tr></table>
    </div>
  </div>
  <div class="week">
    <div class="dayofweek">
      <div class="weekday"><h3>Понедельник (24 декабря 2018 г.)</h3></div>
      <table><tr title="Тема: Повторение"><td>Математика</td><td>№ 5</td>
        <td class="col-mark"><span class="mark">5</span></td></tr></table>
    </div>
  </div>
</div>
"""

LIST_HTML = """
<div id="marks">
  <div id="mark-row">
    <div class="mark-label">Математика</div>
    <span class="mark"><a href="#" onclick="showMarkInfo('17 декабря 2018 г. (понедельник)', 'Ответ на уроке'); return false;">4</a></span>
    <span class="mark"><a href="#" onclick="showMarkInfo('19 декабря 2018 г. (среда)', 'Контрольная'); return false;">5</a></span>
    <span class="mark avg"><a href="#">4.5</a></span>
  </div>
  <div id="mark-row">
    <div class="mark-label">Физика</div>
    <span class="mark"><a href="#" onclick="showMarkInfo(); return false;">3</a></span>
  </div>
</div>
"""

FINAL_HTML = """
<div id="marks">
  <div id="wrap-col">
    <div id="wrap-marks">
      <div>
        <div id="mark-row" name="101">
          <span class="mark itg-q"><a onclick="showMarkItogInfo('1 четверть', '5')">5</a></span>
          <span class="mark itg-q"><a onclick="showMarkItogInfo('2 четверть', '4')">4</a></span>
          <span class="mark itg-y"><a onclick="showMarkItogInfo('Годовая', '5')">5</a></span>
        </div>
        <div id="mark-row" name="999">
          <span class="mark itg-q"><a onclick="showMarkItogInfo('3 четверть', '3')">3</a></span>
          <span class="mark itg-q"><a onclick="showMarkItogInfo('Итог', '3')">3</a></span>
          <span class="mark"><a>-</a></span>
        </div>
      </div>
    </div>
  </div>
</div>
"""

COURSES_HTML = """
<select>
  <option value="0">Все предметы</option>
  <option value="101">Математика</option>
  <option value="102">Физика</option>
</select>
"""


class TestMarksPath:
    @pytest.mark.parametrize(
        "period,list_type,path",
        [
            (None, ListType.NOTE, "/marks/current/note/"),
            ("month2", ListType.NOTE, "/marks/current/month2/note/"),
            (MarkRange.MONTH9, ListType.LIST, "/marks/current/month9/list/"),
            ("q2", ListType.LIST, "/marks/current/q2/list/"),
        ],
    )
    def test_path_segments(self, session, period, list_type, path):
        """The list type and period tokens shall be used verbatim as URL segments."""
        assert MarksPage(session).path_for(period, list_type) == path


class TestNoteMarks:
    def test_one_row_two_grades(self, session, transport, url):
        """A row with grade markers 4 and 5 shall yield one mark with grades [4, 5]."""
        transport.add(url("/marks/current/note/"), NOTE_HTML)

        marks = MarksPage(session).current()

        assert len(marks) == 1
        mark = marks[0]
        assert mark.grades == [4, 5]
        assert mark.date.date().isoformat() == "2018-12-17"
        assert mark.date.utcoffset() == timedelta(hours=3)
        assert mark.day_of_week == "Понедельник"
        assert mark.course_name == "Математика"
        assert mark.subject == "Обыкновенные дроби"
        assert mark.homework == "Стр. 45, № 3"
        assert mark.user_id == "ivanov"
        assert mark.school_id == 83
        assert (mark.start_year, mark.end_year) == (2018, 2019)
        assert mark.quarter is None and not mark.annual

    def test_document_order_and_empty_cells(self, session, transport, url):
        """Every lesson row shall yield a mark in document order, with or without grades."""
        transport.add(url("/marks/current/month12/note/"), NOTE_TWO_WEEKS_HTML)

        marks = MarksPage(session).for_period(MarkRange.MONTH12)

        assert [m.course_name for m in marks] == [
            "Русский язык",
            "Физкультура",
            "История",
            "Математика",
        ]
        assert marks[0].grades == []  # "н" is an absence, not a grade
        assert marks[1].grades == [] and marks[1].subject == ""
        assert marks[3].date.date().isoformat() == "2018-12-24"

    def test_day_header_without_date(self, session, transport, url):
        """A day header without a date shall leave the date unknown, not abort."""
        transport.add(url("/marks/current/month12/note/"), NOTE_TWO_WEEKS_HTML)

        history = MarksPage(session).for_period("month12")[2]

        assert history.date is None
        assert history.day_of_week == "Суббота"
        assert history.grades == [3]


class TestListMarks:
    def test_one_mark_per_grade(self, session, transport, url):
        """Each non-average grade marker shall become its own mark."""
        transport.add(url("/marks/current/q2/list/"), LIST_HTML)

        marks = MarksPage(session).extract("q2", ListType.LIST)

        assert [(m.course_name, m.grades) for m in marks] == [
            ("Математика", [4]),
            ("Математика", [5]),
            ("Физика", [3]),
        ]
        assert marks[0].date.date().isoformat() == "2018-12-17"
        assert marks[1].date.date().isoformat() == "2018-12-19"

    def test_unmatched_handler_means_unknown_date(self, session, transport, url):
        transport.add(url("/marks/current/q2/list/"), LIST_HTML)
        assert MarksPage(session).extract("q2", ListType.LIST)[2].date is None


class TestDateMarks:
    def test_date_layout_is_empty(self, session, transport):
        """The date layout shall return no marks and issue no request."""
        assert MarksPage(session).extract(None, ListType.DATE) == []
        assert transport.requests == []


class TestMarksErrors:
    def test_requires_context(self, session):
        session.context = None
        with pytest.raises(DerivationError):
            MarksPage(session).current()

    def test_fetch_failure(self, session, transport, url):
        transport.add(url("/marks/current/note/"), (500, "oops"))
        with pytest.raises(TransportError):
            MarksPage(session).current()


class TestFinalMarks:
    def test_quarter_or_annual(self, session, transport, url):
        """Every final mark shall be either quarterly (1..4) or annual, never both or neither."""
        transport.add(url("/marks/itog/"), FINAL_HTML)
        transport.add(url("/ajax/subj/4821"), COURSES_HTML)

        marks = FinalMarksPage(session).extract()

        assert len(marks) == 4
        for mark in marks:
            assert (mark.quarter is not None) != mark.annual
            if mark.quarter is not None:
                assert 1 <= mark.quarter <= 4

    def test_fields(self, session, transport, url):
        transport.add(url("/marks/itog/"), FINAL_HTML)
        transport.add(url("/ajax/subj/4821"), COURSES_HTML)

        marks = FinalMarksPage(session).extract()

        assert [(m.course_id, m.quarter, m.annual, m.grades) for m in marks] == [
            (101, 1, False, [5]),
            (101, 2, False, [4]),
            (101, None, True, [5]),
            (999, 3, False, [3]),
        ]
        assert marks[0].course_name == "Математика"
        assert (marks[0].start_year, marks[0].end_year) == (2018, 2019)

    def test_unknown_course_keeps_empty_name(self, session, transport, url):
        """A course id missing from the catalog shall leave the course name empty."""
        transport.add(url("/marks/itog/"), FINAL_HTML)

        marks = FinalMarksPage(session).extract(courses=[Course(id=101, name="Алгебра")])

        assert marks[0].course_name == "Алгебра"
        assert marks[-1].course_id == 999
        assert marks[-1].course_name == ""
        # catalog supplied, so no course request
        assert transport.urls() == [url("/marks/itog/")]
