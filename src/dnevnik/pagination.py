"""Pager discovery for list pages (messages, homework).

Pager markup:
  div.pager
    span.page_remark   -> "Страницы:" (present only when there is more than one page)
    span.page          -> one per page number, current page without a link
    span.page.page_next -> "next" control, always last
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from src.dnevnik.errors import ParseError, PartialResultError, TransportError
from src.dnevnik.logging import get_logger
from src.dnevnik.models import PageInfo
from src.dnevnik.navigator import Navigator

if TYPE_CHECKING:
    from src.dnevnik.session import SessionManager

log = get_logger(__name__)

T = TypeVar("T")

MESSAGES_PAGER = "#content > div.pager"
HOMEWORK_PAGER = "#homework_list > div.pager"


def resolve_pages(doc: Navigator, container: str = MESSAGES_PAGER) -> PageInfo:
    """Read page count and next-page availability from the pager.

    No remark node (or an empty one) means single-page content.

    Raises:
        ParseError: The pager is present but the page count is not a number.
    """
    if not doc.text(f"{container} > span.page_remark"):
        return PageInfo()

    pages = doc.all(f"{container} > span.page")
    if len(pages) < 2:
        raise ParseError(f"pager {container!r} has {len(pages)} page nodes")

    # the last node is the "next" control, not a page number
    total_text = pages[-2].text()
    if not total_text.isdecimal():
        raise ParseError(f"page count is not numeric: {total_text!r}")

    return PageInfo(
        has_pages=True,
        total_pages=int(total_text),
        has_next=pages[-1].has_class("page_next"),
    )


def collect_pages(
    session: "SessionManager",
    path: str,
    container: str,
    parse: Callable[[Navigator], list[T]],
) -> list[T]:
    """Fetch every page of a paged list and concatenate the parsed rows.

    Pages are fetched one after another as ``<path>?page=N``.

    Raises:
        TransportError: The first page could not be fetched.
        PartialResultError: A later page failed; ``records`` holds the rows
            of the pages fetched before it.
    """
    first = session.get(path)
    records = parse(first)
    info = resolve_pages(first, container)

    if session.debug:
        log.debug(
            "pager_resolved",
            path=path,
            has_pages=info.has_pages,
            total_pages=info.total_pages,
            pages=[p.text() for p in first.all(f"{container} > span.page")],
        )

    for number in range(2, info.total_pages + 1):
        try:
            doc = session.get(f"{path}?page={number}")
        except TransportError as e:
            log.warning("page_fetch_failed", path=path, page=number, collected=len(records))
            raise PartialResultError(
                f"page {number} of {path} failed after {len(records)} records", records
            ) from e
        records.extend(parse(doc))

    return records
