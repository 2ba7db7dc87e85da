"""Portal session: authentication, cookies and the derived school/class context.

SessionManager owns everything that is mutable about talking to the portal:
credentials, the anti-forgery token, cookies and the current Context. Page
extractors fetch through it. One SessionManager serves one logical flow at
a time; there is no internal locking.
"""

import json
from typing import Any
from zoneinfo import ZoneInfo

from src.dnevnik.config import DnevnikConfig, get_config
from src.dnevnik.errors import (
    AuthError,
    DerivationError,
    DerivationFailure,
    ParseError,
    TransportError,
)
from src.dnevnik.logging import get_logger
from src.dnevnik.models import Context, Credentials
from src.dnevnik.navigator import Navigator
from src.dnevnik.patterns import parse_class_id, parse_class_role, parse_edu_year
from src.dnevnik.transport import CookieStore, FetchResponse, RequestsTransport, Transport

logger = get_logger(__name__)

ITEMS_PER_PAGE_COOKIE = "items_perpage"
EDU_YEAR_COOKIE = "edu_year"


class SessionManager:
    """Manages portal authentication state and the current context.

    The context (class id, class label, academic year) is only known after
    derive_context() succeeds. Until then, and after any failed derivation,
    ``context`` is None.
    """

    LOGIN_PATH = "/accounts/login/"
    # The homework page doubles as the dashboard carrying role, class id and year
    DASHBOARD_PATH = "/homework/"

    # Selectors on the dashboard page
    ROLE = "#auth_info > #role"
    EDU_YEAR = "#eduyear > #curedy"

    def __init__(
        self,
        credentials: Credentials,
        *,
        transport: Transport | None = None,
        cookies: CookieStore | None = None,
        config: DnevnikConfig | None = None,
    ) -> None:
        """Initialize SessionManager.

        Args:
            credentials: Portal login, password and school id.
            transport: HTTP fetch capability; a RequestsTransport by default.
            cookies: Cookie store; defaults to the transport when it is one.
            config: Client configuration; the environment singleton by default.
        """
        self.config = config or get_config()
        self.credentials = credentials
        self.transport = transport or RequestsTransport(
            timeout=self.config.request_timeout,
            verify=self.config.verify_tls,
        )
        self.cookies: CookieStore = cookies or self.transport  # type: ignore[assignment]
        self.tz = ZoneInfo(self.config.timezone)
        self.token: str | None = None
        self.context: Context | None = None

        # Large page size so most list pages come back in one piece
        self.set_cookie(ITEMS_PER_PAGE_COOKIE, str(self.config.items_per_page))

        logger.info(
            "session_manager_initialized",
            base_url=self.config.dnevnik_url,
            login=credentials.login,
            school_id=credentials.school_id,
        )

    @classmethod
    def from_config(cls, config: DnevnikConfig | None = None) -> "SessionManager":
        """Build a session from the dnevnik_user/dnevnik_pass/dnevnik_school_id settings."""
        config = config or get_config()
        credentials = Credentials(
            login=config.dnevnik_user,
            password=config.dnevnik_pass,
            school_id=config.dnevnik_school_id,
        )
        return cls(credentials, config=config)

    @property
    def debug(self) -> bool:
        return self.config.debug

    @property
    def school_id(self) -> int:
        return self.credentials.school_id

    def url(self, path: str) -> str:
        """Absolute portal URL for a path like "/marks/current/"."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.config.dnevnik_url.rstrip('/')}{path}"

    # ── transport ───────────────────────────────────────────────

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
        check_status: bool = True,
    ) -> FetchResponse:
        """Issue one request through the transport.

        Raises:
            TransportError: The fetch failed, or (with check_status) the
                portal answered with a non-2xx status.
        """
        url = self.url(path)
        resp = self.transport.request(method, url, headers=headers, data=data)
        logger.debug("fetched", method=method, url=url, status=resp.status)
        if check_status and not resp.ok:
            raise TransportError(
                f"{method} {url} returned HTTP {resp.status}", url=url, status=resp.status
            )
        return resp

    def get(self, path: str) -> Navigator:
        """GET a page and parse it."""
        return Navigator.from_html(self.request("GET", path).text)

    def get_json(self, path: str) -> Any:
        resp = self.request("GET", path)
        try:
            return json.loads(resp.text)
        except json.JSONDecodeError as e:
            raise ParseError(f"{resp.url} did not return JSON: {e}") from e

    # ── cookies ─────────────────────────────────────────────────

    def set_cookie(self, name: str, value: str) -> None:
        self.cookies.set_cookie(name, value, domain=self.config.portal_host, path="/")
        logger.debug("cookie_set", name=name, value=value)

    def get_cookie(self, name: str) -> str | None:
        return self.cookies.get_cookie(name, domain=self.config.portal_host)

    def set_context_cookie(self, name: str, value: str) -> Context:
        """Install a cookie and re-derive the context.

        The portal serves a different class/year for a different edu_year
        cookie, so the previous context is discarded, not merged.

        Raises:
            DerivationError: The dashboard could not be read with the new cookie.
        """
        self.set_cookie(name, value)
        return self.derive_context()

    def switch_edu_year(self, start_year: int | None = None) -> Context:
        """Switch to the academic year starting in start_year (None = current)."""
        return self.set_context_cookie(EDU_YEAR_COOKIE, str(start_year) if start_year else "")

    # ── authentication ──────────────────────────────────────────

    def authenticate(self) -> Context:
        """Log in and derive the session context.

        The response to the credentials POST is not inspected: the login
        counts as successful only if the dashboard then yields a context.

        Returns:
            The derived Context.

        Raises:
            AuthError: No anti-forgery token on the login page, or no usable
                context after submitting credentials.
            TransportError: A fetch failed.
        """
        login_url = self.url(self.LOGIN_PATH)
        logger.info("authentication_started", url=login_url)

        doc = self.get(self.LOGIN_PATH)
        token = doc.attr("value", self.config.dnevnik_token_selector)
        if not token:
            logger.error("authentication_failed", reason="token_not_found")
            raise AuthError("Anti-forgery token not found on the login page")
        self.token = token

        payload = {
            "next": "",
            "csrfmiddlewaretoken": token,
            "username": self.credentials.portal_username,
            "fake_username": self.credentials.login,
            "password": self.credentials.password,
            "school": str(self.credentials.school_id),
            "submit": "",
        }
        base = self.config.dnevnik_url.rstrip("/")
        headers = {
            "Referer": login_url,
            "Host": self.config.portal_host,
            "Origin": base,
            "Content-Type": "application/x-www-form-urlencoded",
        }
        self.request("POST", self.LOGIN_PATH, headers=headers, data=payload, check_status=False)

        try:
            context = self.derive_context()
        except DerivationError as e:
            logger.error("authentication_failed", reason=e.reason.value)
            raise AuthError(f"Login did not yield a usable context: {e}") from e

        logger.info("authentication_succeeded", class_id=context.class_id)
        return context

    @property
    def is_authenticated(self) -> bool:
        return self.context is not None

    # ── context ─────────────────────────────────────────────────

    def derive_context(self, doc: Navigator | None = None) -> Context:
        """Read class and academic year from the dashboard page.

        Args:
            doc: An already fetched dashboard page; fetched when omitted.

        Raises:
            DerivationError: A required fragment is missing or malformed.
            TransportError: The dashboard fetch failed.
        """
        self.context = None
        if doc is None:
            doc = self.get(self.DASHBOARD_PATH)

        try:
            class_number, class_char = parse_class_role(doc.text(self.ROLE, strip=False))
        except ParseError as e:
            logger.warning("context_derivation_failed", reason="role_not_found")
            raise DerivationError(DerivationFailure.ROLE_NOT_FOUND, str(e)) from e

        try:
            class_id = parse_class_id(doc.attr("onload", "body") or "")
        except ParseError as e:
            logger.warning("context_derivation_failed", reason="class_id_not_numeric")
            raise DerivationError(DerivationFailure.CLASS_ID_NOT_NUMERIC, str(e)) from e

        try:
            year_start, year_end = parse_edu_year(doc.text(self.EDU_YEAR))
        except ParseError as e:
            logger.warning("context_derivation_failed", reason="edu_year_not_found")
            raise DerivationError(DerivationFailure.EDU_YEAR_NOT_FOUND, str(e)) from e

        self.context = Context(
            school_id=self.credentials.school_id,
            class_id=class_id,
            class_number=class_number,
            class_char=class_char,
            edu_year_start=year_start,
            edu_year_end=year_end,
        )
        logger.info("context_derived", **self.context.model_dump())
        return self.context

    def require_context(self) -> Context:
        """Current context, or DerivationError when it has not been derived."""
        if self.context is None:
            raise DerivationError(
                DerivationFailure.NOT_DERIVED, "Session context is not derived; authenticate first"
            )
        return self.context
