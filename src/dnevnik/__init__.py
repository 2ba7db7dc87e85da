"""dnevnik76 client: typed records scraped from the my.dnevnik76.ru school portal.

Log in with SessionManager, then pass the session to the page extractors
(MarksPage, HomeworkPage, MessagesPage, ...). Region and school catalogs
are anonymous (CatalogPage).
"""

from src.dnevnik.config import DnevnikConfig, get_config
from src.dnevnik.errors import (
    AuthError,
    DerivationError,
    ParseError,
    PartialResultError,
    ScrapingError,
    TransportError,
)
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
from src.dnevnik.pages.catalog import CatalogPage, CoursesPage, dedupe_courses
from src.dnevnik.pages.homework import HomeworkPage
from src.dnevnik.pages.marks import FinalMarksPage, MarksPage
from src.dnevnik.pages.messages import MessagesPage
from src.dnevnik.pages.periods import PeriodsPage, current_period
from src.dnevnik.pages.teachers import TeachersPage
from src.dnevnik.session import SessionManager

__all__ = [
    "SessionManager",
    "DnevnikConfig",
    "get_config",
    "CatalogPage",
    "CoursesPage",
    "FinalMarksPage",
    "HomeworkPage",
    "MarksPage",
    "MessagesPage",
    "PeriodsPage",
    "TeachersPage",
    "current_period",
    "dedupe_courses",
    "Context",
    "Course",
    "Credentials",
    "Homework",
    "ListType",
    "Mark",
    "MarkRange",
    "Message",
    "MessageDetail",
    "Period",
    "Region",
    "School",
    "Teacher",
    "ScrapingError",
    "TransportError",
    "ParseError",
    "DerivationError",
    "AuthError",
    "PartialResultError",
]
