"""HomeworkPage - homework list at /homework/.

DOM structure:
  body[onload="loadSubjects('/ajax/subj/<class id>', true)"]
  #homework_list
    div.pager
    table.list tr
      td:nth-child(1) -> date ("17 декабря 2018 г.")
      td:nth-child(2) -> day of week
      td:nth-child(3) > a -> course name
      td:nth-child(4) -> homework text
      td:nth-child(5) -> lesson subject
"""

from src.dnevnik.dates import try_parse_date
from src.dnevnik.errors import ParseError
from src.dnevnik.logging import get_logger
from src.dnevnik.models import Homework
from src.dnevnik.navigator import Navigator
from src.dnevnik.pagination import HOMEWORK_PAGER, collect_pages
from src.dnevnik.patterns import parse_class_id
from src.dnevnik.session import SessionManager

log = get_logger(__name__)


class HomeworkPage:
    URL_PATH = "/homework/"

    ROWS = "#homework_list > table.list tr:has(> td)"

    def __init__(self, session: SessionManager) -> None:
        self.session = session

    def extract(self) -> list[Homework]:
        """All homework rows in page order.

        Raises:
            TransportError: The first page could not be fetched.
            PartialResultError: A later page failed.
        """
        homework = collect_pages(self.session, self.URL_PATH, HOMEWORK_PAGER, self._parse)
        log.info("homework_extracted", rows=len(homework))
        return homework

    def _class_id(self, doc: Navigator) -> int | None:
        try:
            return parse_class_id(doc.attr("onload", "body") or "")
        except ParseError:
            context = self.session.context
            return context.class_id if context else None

    def _parse(self, doc: Navigator) -> list[Homework]:
        class_id = self._class_id(doc)
        rows = []
        for row in doc.all(self.ROWS):
            date_text = row.text("td:nth-child(1)")
            date = try_parse_date(date_text, self.session.tz)
            if date is None:
                log.warning("homework_date_unknown", value=date_text)

            course_name = row.text("td:nth-child(3) > a") or row.text("td:nth-child(3)")
            rows.append(
                Homework(
                    school_id=self.session.school_id,
                    class_id=class_id,
                    date=date,
                    day_of_week=row.text("td:nth-child(2)"),
                    course_name=course_name,
                    homework=row.text("td:nth-child(4)"),
                    subject=row.text("td:nth-child(5)"),
                )
            )
        return rows
