"""MarksPage and FinalMarksPage - grades from /marks/current/ and /marks/itog/.

Current marks come in three layouts, selected by the last URL segment
(/marks/current/<period>/<note|list|date>/):

note (student diary):
  #marks
    div.week
      div.dayofweek
        div.weekday > h3      -> "Понедельник (17 декабря 2018 г.)"
        table tr[title="Тема: ..."]
          td:nth-child(1)     -> course name
          td:nth-child(2)     -> homework
          td.col-mark > span.mark  -> one per grade

list (one row per course):
  #marks > #mark-row
    div.mark-label            -> course name
    span.mark > a[onclick="showMarkInfo('17 декабря 2018 г. (понедельник)', ...)"]
    span.mark.avg             -> average, not a grade

date: not supported, returns no marks.

Final marks:
  #marks > #wrap-col > #wrap-marks > div > #mark-row[name=<course id>]
    .mark.itg-q > a[onclick="showMarkItogInfo('2 четверть', ...)"]  -> quarterly
    .mark.itg-y > a                                                -> annual
"""

from src.dnevnik.dates import parse_date, try_parse_date
from src.dnevnik.errors import ParseError
from src.dnevnik.logging import get_logger
from src.dnevnik.models import Course, ListType, Mark, MarkRange, Period
from src.dnevnik.navigator import Navigator
from src.dnevnik.pages.catalog import CoursesPage
from src.dnevnik.patterns import parse_final_period, parse_mark_info_date, split_day_header
from src.dnevnik.session import SessionManager

log = get_logger(__name__)

SUBJECT_PREFIX = "Тема: "


def _parse_grade(text: str) -> int | None:
    """Integer grade from marker text; None for non-numeric markers ("н", "зач")."""
    text = text.strip()
    return int(text) if text.isdecimal() else None


class MarksPage:
    """Current marks at /marks/current/ in note or list layout."""

    URL_PATH = "/marks/current/"

    TITLE = "#content > h3"
    WEEK = "#marks > div.week"
    DAY = "div.dayofweek"
    DAY_HEADER = "div.weekday > h3"
    LESSON_ROW = "table tr:has(> td)"
    LESSON_GRADE = "td.col-mark > span.mark"
    COURSE_ROW = "#marks > #mark-row"
    COURSE_LABEL = "div.mark-label"
    COURSE_GRADE = "span.mark"

    def __init__(self, session: SessionManager) -> None:
        self.session = session

    def path_for(
        self, period: "str | MarkRange | Period | None", list_type: ListType
    ) -> str:
        if isinstance(period, Period):
            period = period.token
        elif isinstance(period, MarkRange):
            period = period.value
        if period:
            return f"{self.URL_PATH}{period}/{list_type.value}/"
        return f"{self.URL_PATH}{list_type.value}/"

    def current(self) -> list[Mark]:
        """Marks of the current month in the note layout."""
        return self.extract(None, ListType.NOTE)

    def for_period(self, period: "str | MarkRange | Period") -> list[Mark]:
        return self.extract(period, ListType.NOTE)

    def extract(
        self,
        period: "str | MarkRange | Period | None" = None,
        list_type: ListType = ListType.NOTE,
    ) -> list[Mark]:
        """Fetch and parse marks for a period token or academic month.

        Args:
            period: Period token, month range or Period; None for the current month.
            list_type: Page layout to request.

        Returns:
            Marks in document order. Empty for ListType.DATE.

        Raises:
            TransportError: The page could not be fetched.
            DerivationError: The session has no context.
        """
        if list_type is ListType.DATE:
            log.warning("marks_list_type_unsupported", list_type=list_type.value)
            return []

        self.session.require_context()
        path = self.path_for(period, list_type)
        doc = self.session.get(path)
        log.info("marks_page_loaded", path=path, title=" ".join(doc.text(self.TITLE).split()))

        if list_type is ListType.NOTE:
            marks = self._parse_note(doc)
        else:
            marks = self._parse_list(doc)

        log.info("marks_extracted", path=path, list_type=list_type.value, marks=len(marks))
        return marks

    def _base_mark(self, **fields) -> Mark:
        context = self.session.require_context()
        return Mark(
            user_id=self.session.credentials.login,
            school_id=self.session.school_id,
            start_year=context.edu_year_start,
            end_year=context.edu_year_end,
            **fields,
        )

    def _parse_note(self, doc: Navigator) -> list[Mark]:
        marks: list[Mark] = []
        for week in doc.all(self.WEEK):
            for day in week.all(self.DAY):
                header = day.text(self.DAY_HEADER)
                try:
                    day_of_week, date_text = split_day_header(header)
                    date = parse_date(date_text, self.session.tz)
                except ParseError as e:
                    log.warning("day_header_unparsed", header=header, error=str(e))
                    day_of_week, date = header, None

                for row in day.all(self.LESSON_ROW):
                    grades: list[int] = []
                    for marker in row.all(self.LESSON_GRADE):
                        grade = _parse_grade(marker.text())
                        if grade is None:
                            log.debug("grade_skipped", value=marker.text(), day=header)
                            continue
                        grades.append(grade)

                    subject = (row.attr("title") or "").strip().removeprefix(SUBJECT_PREFIX)
                    marks.append(
                        self._base_mark(
                            course_name=row.text("td:nth-child(1)"),
                            subject=subject.strip(),
                            homework=row.text("td:nth-child(2)"),
                            grades=grades,
                            day_of_week=day_of_week,
                            date=date,
                        )
                    )
        return marks

    def _parse_list(self, doc: Navigator) -> list[Mark]:
        marks: list[Mark] = []
        for block in doc.all(self.COURSE_ROW):
            course_name = block.text(self.COURSE_LABEL)
            for marker in block.all(self.COURSE_GRADE):
                if marker.has_class("avg"):
                    continue
                link = marker.one("a")
                grade = _parse_grade(link.text())
                if grade is None:
                    log.debug("grade_skipped", value=link.text(), course=course_name)
                    continue

                onclick = link.attr("onclick") or ""
                date_text = parse_mark_info_date(onclick)
                date = try_parse_date(date_text, self.session.tz) if date_text else None
                if date is None:
                    log.warning("mark_date_unknown", course=course_name, onclick=onclick)

                marks.append(
                    self._base_mark(course_name=course_name, grades=[grade], date=date)
                )
        return marks


class FinalMarksPage:
    """Quarterly and annual marks at /marks/itog/."""

    URL_PATH = "/marks/itog/"

    COURSE_ROW = "#marks > #wrap-col > #wrap-marks > div > #mark-row"
    MARK = ".mark"
    QUARTER_CLASS = "itg-q"
    ANNUAL_CLASS = "itg-y"

    def __init__(self, session: SessionManager) -> None:
        self.session = session

    def extract(self, courses: list[Course] | None = None) -> list[Mark]:
        """Fetch final marks and name their courses.

        Args:
            courses: Course catalog to join on course id; fetched from the
                class subjects list when omitted.

        Returns:
            Marks with exactly one of ``quarter`` or ``annual`` set.

        Raises:
            TransportError: The page or the course list could not be fetched.
            DerivationError: The session has no context.
        """
        context = self.session.require_context()
        doc = self.session.get(self.URL_PATH)
        if courses is None:
            courses = CoursesPage(self.session).extract()

        names: dict[int, str] = {}
        for course in courses:
            names.setdefault(course.id, course.name)

        marks: list[Mark] = []
        for row in doc.all(self.COURSE_ROW):
            raw_id = (row.attr("name") or "").strip()
            course_id = int(raw_id) if raw_id.isdecimal() else None
            if course_id is None:
                log.warning("final_course_id_invalid", value=raw_id)
            course_name = names.get(course_id, "") if course_id is not None else ""

            for marker in row.all(self.MARK):
                is_quarter = marker.has_class(self.QUARTER_CLASS)
                if not is_quarter and not marker.has_class(self.ANNUAL_CLASS):
                    continue

                link = marker.one("a")
                grade = _parse_grade(link.text())
                if grade is None:
                    log.debug("final_grade_skipped", value=link.text(), course_id=course_id)
                    continue

                quarter = None
                if is_quarter:
                    quarter = parse_final_period(link.attr("onclick") or "")
                    if quarter is None:
                        log.warning(
                            "final_quarter_unknown",
                            course_id=course_id,
                            onclick=link.attr("onclick"),
                        )
                        continue

                marks.append(
                    Mark(
                        user_id=self.session.credentials.login,
                        school_id=self.session.school_id,
                        course_id=course_id,
                        course_name=course_name,
                        grades=[grade],
                        start_year=context.edu_year_start,
                        end_year=context.edu_year_end,
                        quarter=quarter,
                        annual=not is_quarter,
                    )
                )

        if self.session.debug:
            unmatched = sorted({m.course_id for m in marks if not m.course_name and m.course_id})
            log.debug("final_courses_unmatched", course_ids=unmatched)
        log.info("final_marks_extracted", marks=len(marks))
        return marks
