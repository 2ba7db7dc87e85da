"""MessagesPage - inbox list, single message and unread counter.

Inbox at /messages/input/ (paged as ?page=N, items_perpage is ignored here):
  #content > div.pager
  #content > form > table.list tr
    td:nth-child(1) > input[value=<message id>]
    td:nth-child(2) > a[.unread]  -> subject
    td:nth-child(3)               -> sender
    td:nth-child(4)               -> "17 декабря 2018 г. 18:09"

Message view at /messages/input/<id>/:
  #msgview
    div.msg-meta > div.msg-props
      div:nth-child(1) -> "Дата: 17 декабря 2018 г. 18:09"
      div:nth-child(2) -> "От: " <a>role</a> <a>sender</a>
    div.msg-text       -> body

Counter at /ajax/messages_count/ (JSON):
  {"unread_messages": 2, "all_messages": 40}
"""

from src.dnevnik.dates import try_parse_date
from src.dnevnik.errors import ParseError
from src.dnevnik.logging import get_logger
from src.dnevnik.models import Message, MessageDetail, MessagesCount
from src.dnevnik.navigator import Navigator
from src.dnevnik.pagination import MESSAGES_PAGER, collect_pages
from src.dnevnik.session import SessionManager

log = get_logger(__name__)

DATE_PREFIX = "Дата: "


class MessagesPage:
    URL_PATH = "/messages/input/"
    COUNT_PATH = "/ajax/messages_count/"

    ROWS = "#content > form > table.list tr:has(> td)"
    VIEW = "#msgview"
    VIEW_DATE = "#msgview > div.msg-meta > div.msg-props > div:nth-child(1)"
    VIEW_SENDER = "#msgview > div.msg-meta > div.msg-props > div:nth-child(2) > a:nth-child(2)"
    VIEW_BODY = "#msgview > div.msg-text"

    def __init__(self, session: SessionManager) -> None:
        self.session = session

    def extract(self) -> list[Message]:
        """Inbox rows across all pages.

        Raises:
            TransportError: The first page could not be fetched.
            PartialResultError: A later page failed; carries earlier rows.
        """
        messages = collect_pages(self.session, self.URL_PATH, MESSAGES_PAGER, self._parse)
        log.info("messages_extracted", messages=len(messages))
        return messages

    def _parse(self, doc: Navigator) -> list[Message]:
        messages = []
        for row in doc.all(self.ROWS):
            raw_id = (row.attr("value", "td:nth-child(1) > input") or "").strip()
            if not raw_id.isdecimal():
                log.warning("message_row_skipped", reason="no_id", value=raw_id)
                continue

            subject = row.one("td:nth-child(2) > a")
            date_text = row.text("td:nth-child(4)")
            date = try_parse_date(date_text, self.session.tz)
            if date is None:
                log.warning("message_date_unknown", id=raw_id, value=date_text)

            messages.append(
                Message(
                    id=int(raw_id),
                    user_id=self.session.credentials.login,
                    date=date,
                    sender=row.text("td:nth-child(3)"),
                    unread=subject.has_class("unread"),
                    subject=subject.text(),
                )
            )
        return messages

    def detail(self, message_id: int) -> MessageDetail:
        """Fetch one message with its body.

        Raises:
            TransportError: The message page could not be fetched.
            ParseError: The page has no message view.
        """
        doc = self.session.get(f"{self.URL_PATH}{message_id}/")
        if not doc.one(self.VIEW):
            raise ParseError(f"message {message_id} has no message view")

        date_text = doc.text(self.VIEW_DATE).removeprefix(DATE_PREFIX)
        date = try_parse_date(date_text, self.session.tz)
        if date is None:
            log.warning("message_date_unknown", id=message_id, value=date_text)

        message = MessageDetail(
            id=message_id,
            date=date,
            sender=doc.text(self.VIEW_SENDER),
            body=doc.text(self.VIEW_BODY),
        )
        if self.session.debug:
            log.debug("message_loaded", message=message.model_dump(mode="json"))
        return message

    def count(self) -> MessagesCount:
        """Unread and total message counters."""
        data = self.session.get_json(self.COUNT_PATH)
        if not isinstance(data, dict):
            raise ParseError(f"unexpected messages counter payload: {data!r}")
        return MessagesCount(
            unread=data.get("unread_messages", 0),
            total=data.get("all_messages", 0),
        )
