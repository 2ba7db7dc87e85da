"""PeriodsPage - academic sub-periods listed on /marks/current/.

DOM structure:
  select#mark_range
    optgroup[label="Четверти"]
      option[value=<token>]  -> "1 четверть"
    optgroup[label="Месяцы"]
      option[value="month9"] -> "Сентябрь"

The period bounds are not on the list page. Each period's note view
(/marks/current/<token>/note/) carries them in its heading:
  #content > h3 -> "Оценки за период с 1 сентября 2018 г. по 28 октября 2018 г."
"""

from datetime import datetime, timezone

from pydantic import ValidationError

from src.dnevnik.dates import parse_date
from src.dnevnik.errors import ParseError, TransportError
from src.dnevnik.logging import get_logger
from src.dnevnik.models import ListType, Period
from src.dnevnik.patterns import parse_period_range
from src.dnevnik.session import SessionManager

log = get_logger(__name__)

QUARTER_MARKER = "четверть"


def current_period(
    periods: list[Period],
    now: datetime | None = None,
    name_contains: str = QUARTER_MARKER,
) -> Period | None:
    """First period whose name contains name_contains and which includes now."""
    now = now or datetime.now(timezone.utc)
    for period in periods:
        if name_contains in period.name and period.is_current(now):
            return period
    return None


class PeriodsPage:
    """Period selector of the current marks page."""

    URL_PATH = "/marks/current/"

    OPTIONS = "#mark_range > optgroup > option"
    TITLE = "#content > h3"

    def __init__(self, session: SessionManager) -> None:
        self.session = session

    def extract(self) -> list[Period]:
        """All periods in page order, one extra fetch per period.

        A period whose page fails to load or has no parsable range is
        skipped; the rest are still returned.

        Raises:
            TransportError: The period list itself could not be fetched.
            DerivationError: The session has no context.
        """
        context = self.session.require_context()
        doc = self.session.get(self.URL_PATH)
        options = doc.all(self.OPTIONS)

        periods: list[Period] = []
        for option in options:
            name = option.text()
            token = (option.attr("value") or "").strip()
            if not token:
                log.debug("period_option_skipped", name=name)
                continue

            path = f"{self.URL_PATH}{token}/{ListType.NOTE.value}/"
            try:
                heading = self.session.get(path).text(self.TITLE)
                start_text, end_text = parse_period_range(heading)
                period = Period(
                    school_id=context.school_id,
                    start_year=context.edu_year_start,
                    end_year=context.edu_year_end,
                    name=name,
                    token=token,
                    start=parse_date(start_text, self.session.tz),
                    end=parse_date(end_text, self.session.tz),
                )
            except (TransportError, ParseError, ValidationError) as e:
                log.warning("period_skipped", name=name, token=token, error=str(e))
                continue

            if self.session.debug:
                log.debug("period_parsed", period=period.model_dump(mode="json"))
            periods.append(period)

        log.info("periods_extracted", options=len(options), periods=len(periods))
        return periods

    def current_quarter(self, now: datetime | None = None) -> Period | None:
        """The quarter that includes now, or None between quarters."""
        return current_period(self.extract(), now)
