"""Error hierarchy for the dnevnik76 client.

The client never retries on its own. The transient/permanent split lets a
caller wrap an operation in its own retry policy, for example with tenacity:

    @retry(retry=retry_if_exception_type(TransientError), stop=stop_after_attempt(3))
    def fetch_marks(session: SessionManager):
        ...
"""

from enum import Enum
from typing import Any


class ScrapingError(Exception):
    """Base exception for all client errors."""

    pass


class TransientError(ScrapingError):
    """Temporary failure that may succeed on retry."""

    pass


class TransportError(TransientError):
    """A fetch failed or the portal answered with a non-OK status.

    Fatal to the calling operation.
    """

    def __init__(self, message: str, *, url: str = "", status: int | None = None):
        super().__init__(message)
        self.url = url
        self.status = status


class PermanentError(ScrapingError):
    """Failure that won't succeed on retry.

    Examples: missing HTML fragment, regex mismatch, data validation failure.
    """

    pass


class ParseError(PermanentError):
    """HTML structure or an inline-script pattern did not have the expected shape."""

    pass


class DerivationFailure(str, Enum):
    """Which part of the dashboard page could not be read."""

    ROLE_NOT_FOUND = "role_not_found"
    CLASS_ID_NOT_NUMERIC = "class_id_not_numeric"
    EDU_YEAR_NOT_FOUND = "edu_year_not_found"
    NOT_DERIVED = "not_derived"


class DerivationError(PermanentError):
    """Session context could not be derived from the dashboard page.

    The session context is unusable when this is raised; no partial
    context is kept.
    """

    def __init__(self, reason: DerivationFailure, message: str = ""):
        super().__init__(message or reason.value)
        self.reason = reason


class AuthError(PermanentError):
    """Login failed: no anti-forgery token, or no usable context afterwards.

    Requires human intervention (credentials, school id), cannot be fixed by retry.
    """

    pass


class PartialResultError(ScrapingError):
    """A multi-fetch list stopped midway.

    Carries the records collected before the failing fetch; the failing
    TransportError is chained as __cause__.
    """

    def __init__(self, message: str, records: list[Any]):
        super().__init__(message)
        self.records = records
