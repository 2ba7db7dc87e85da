"""HTTP fetch and cookie storage used by SessionManager.

The session only needs two narrow capabilities: issue one request and get
status plus body back, and read/write cookies for the portal domain.
RequestsTransport provides both on top of a requests.Session; tests plug
in a stub with the same shape.
"""

from dataclasses import dataclass
from typing import Protocol

import requests

from src.dnevnik.errors import TransportError
from src.dnevnik.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class FetchResponse:
    url: str
    status: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
    ) -> FetchResponse: ...


class CookieStore(Protocol):
    def set_cookie(
        self, name: str, value: str, *, domain: str, path: str = "/"
    ) -> None: ...

    def get_cookie(self, name: str, *, domain: str) -> str | None: ...


class RequestsTransport:
    """Transport and CookieStore backed by one requests.Session.

    Redirects are followed, so the login POST ends on whatever page the
    portal redirects to.
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        verify: bool = True,
        http: requests.Session | None = None,
    ) -> None:
        self.http = http or requests.Session()
        self.http.verify = verify
        self.timeout = timeout

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
    ) -> FetchResponse:
        try:
            resp = self.http.request(
                method, url, headers=headers, data=data, timeout=self.timeout
            )
        except requests.RequestException as e:
            log.warning("fetch_failed", method=method, url=url, error=str(e))
            raise TransportError(f"{method} {url} failed: {e}", url=url) from e

        # Portal pages are utf-8 but not always declared as such
        if "charset" not in resp.headers.get("Content-Type", "").lower():
            resp.encoding = "utf-8"
        return FetchResponse(url=resp.url, status=resp.status_code, text=resp.text)

    def set_cookie(self, name: str, value: str, *, domain: str, path: str = "/") -> None:
        # Replace instead of adding a second cookie with the same name
        self.http.cookies.set(name, None, domain=domain, path=path)
        self.http.cookies.set(name, value, domain=domain, path=path)

    def get_cookie(self, name: str, *, domain: str) -> str | None:
        return self.http.cookies.get(name, domain=domain)
