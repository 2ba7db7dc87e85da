"""TeachersPage - teachers of the current class at /teachers/.

DOM structure:
  #content > table.list tr
    td:nth-child(2)            -> full name
    td:nth-child(3) [> b]      -> course name (bold when the cell has extra notes)
    td.action_links > a.mailto[href="/messages/new/?to=<contact>@<school id>"]
"""

from src.dnevnik.errors import ParseError
from src.dnevnik.logging import get_logger
from src.dnevnik.models import Teacher
from src.dnevnik.patterns import parse_mailto_contact
from src.dnevnik.session import SessionManager

log = get_logger(__name__)


class TeachersPage:
    URL_PATH = "/teachers/"

    ROWS = "#content > table.list tr:has(> td)"
    MAILTO = "td.action_links > a.mailto"

    def __init__(self, session: SessionManager) -> None:
        self.session = session

    def extract(self) -> list[Teacher]:
        doc = self.session.get(self.URL_PATH)
        school_id = self.session.school_id

        teachers = []
        for row in doc.all(self.ROWS):
            full_name = row.text("td:nth-child(2)")
            try:
                user_id = parse_mailto_contact(row.attr("href", self.MAILTO) or "", school_id)
            except ParseError:
                # no mail link for some staff rows
                log.debug("teacher_contact_missing", full_name=full_name)
                user_id = ""

            course_name = row.text("td:nth-child(3) > b") or row.text("td:nth-child(3)")
            teachers.append(
                Teacher(
                    school_id=school_id,
                    user_id=user_id,
                    full_name=full_name,
                    course_name=course_name,
                )
            )

        log.info("teachers_extracted", teachers=len(teachers))
        return teachers
