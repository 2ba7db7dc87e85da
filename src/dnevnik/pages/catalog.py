"""Reference data: regions, schools and class courses.

Regions and schools come from the anonymous AJAX endpoints the login form
uses to fill its selects, so they need no session:

  /ajax/kladr/?login=true          select > option[value=<region id>]   (0 = placeholder)
  /ajax/school/<id>/?login=true    select > optgroup[label=<type>] > option[value=<school id>]

Courses of the current class come from /ajax/subj/<class id> and need a
logged-in session with a derived context.
"""

from src.dnevnik.config import DnevnikConfig, get_config
from src.dnevnik.errors import PartialResultError, ScrapingError, TransportError
from src.dnevnik.logging import get_logger
from src.dnevnik.models import Course, Region, School
from src.dnevnik.navigator import Navigator
from src.dnevnik.session import EDU_YEAR_COOKIE, SessionManager
from src.dnevnik.transport import RequestsTransport, Transport

log = get_logger(__name__)


def _option_id(option: Navigator) -> int | None:
    value = (option.attr("value") or "").strip()
    return int(value) if value.isdecimal() else None


def dedupe_courses(courses: list[Course]) -> list[Course]:
    """One course per (id, name) pair, in first-seen order."""
    return list(dict.fromkeys(courses))


class CatalogPage:
    """Anonymous region and school lists."""

    REGIONS_PATH = "/ajax/kladr/?login=true"
    SCHOOLS_PATH = "/ajax/school/{region_id}/?login=true"

    def __init__(
        self, transport: Transport | None = None, config: DnevnikConfig | None = None
    ) -> None:
        self.config = config or get_config()
        self.transport = transport or RequestsTransport(
            timeout=self.config.request_timeout,
            verify=self.config.verify_tls,
        )

    def _get(self, path: str) -> Navigator:
        url = f"{self.config.dnevnik_url.rstrip('/')}{path}"
        resp = self.transport.request("GET", url)
        if not resp.ok:
            raise TransportError(f"GET {url} returned HTTP {resp.status}", url=url, status=resp.status)
        return Navigator.from_html(resp.text)

    def regions(self) -> list[Region]:
        """All regions, without the zero placeholder option."""
        doc = self._get(self.REGIONS_PATH)
        regions = []
        for option in doc.all("select > option"):
            region_id = _option_id(option)
            if not region_id:
                continue
            regions.append(Region(id=region_id, name=option.text()))
        log.info("regions_extracted", regions=len(regions))
        return regions

    def schools(self, region_id: int) -> list[School]:
        """Schools of a region, each tagged with its optgroup label as type."""
        doc = self._get(self.SCHOOLS_PATH.format(region_id=region_id))
        schools = []
        for group in doc.all("select > optgroup"):
            school_type = (group.attr("label") or "").strip()
            for option in group.all("option"):
                school_id = _option_id(option)
                if school_id is None:
                    log.debug("school_option_skipped", value=option.attr("value"))
                    continue
                schools.append(
                    School(id=school_id, region_id=region_id, name=option.text(), type=school_type)
                )
        log.info("schools_extracted", region_id=region_id, schools=len(schools))
        return schools


class CoursesPage:
    """Courses taught to the session's current class."""

    URL_PATH = "/ajax/subj/{class_id}"

    def __init__(self, session: SessionManager) -> None:
        self.session = session

    def extract(self) -> list[Course]:
        """Raises DerivationError when the session has no context."""
        context = self.session.require_context()
        doc = self.session.get(self.URL_PATH.format(class_id=context.class_id))
        courses = []
        for option in doc.all("select > option"):
            course_id = _option_id(option)
            if not course_id:
                continue
            courses.append(Course(id=course_id, name=option.text()))
        log.info("courses_extracted", class_id=context.class_id, courses=len(courses))
        return courses

    def extract_for_years(self, start_years: list[int]) -> list[Course]:
        """Courses over several academic years, deduplicated.

        Switches the edu_year cookie for every year and restores the
        previous selection afterwards.

        Raises:
            PartialResultError: A year (or the final restore) failed to
                load; ``records`` holds the courses collected before it.
            DerivationError: A year's dashboard had no usable context.
        """
        previous = self.session.get_cookie(EDU_YEAR_COOKIE) or ""
        courses: list[Course] = []
        try:
            for year in start_years:
                try:
                    self.session.switch_edu_year(year)
                    courses.extend(self.extract())
                except TransportError as e:
                    log.warning("courses_year_failed", year=year, collected=len(courses))
                    raise PartialResultError(
                        f"courses for {year} failed after {len(courses)} courses",
                        dedupe_courses(courses),
                    ) from e
        except ScrapingError:
            # the original failure wins over a failed restore
            try:
                self.session.set_context_cookie(EDU_YEAR_COOKIE, previous)
            except ScrapingError as restore_error:
                log.warning("edu_year_restore_failed", value=previous, error=str(restore_error))
            raise

        try:
            self.session.set_context_cookie(EDU_YEAR_COOKIE, previous)
        except TransportError as e:
            log.warning("edu_year_restore_failed", value=previous, error=str(e))
            raise PartialResultError(
                f"restoring edu_year {previous!r} failed after {len(courses)} courses",
                dedupe_courses(courses),
            ) from e
        return dedupe_courses(courses)
