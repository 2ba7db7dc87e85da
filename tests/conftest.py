"""Shared fixtures: a stub transport serving canned portal pages."""

from collections.abc import Callable

import pytest

from src.dnevnik.config import DnevnikConfig
from src.dnevnik.models import Context, Credentials
from src.dnevnik.session import SessionManager
from tests.portal_stub import BASE_URL, StubTransport


@pytest.fixture
def config() -> DnevnikConfig:
    return DnevnikConfig(dnevnik_url=BASE_URL, _env_file=None)


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(login="ivanov", password="secret", school_id=83)


@pytest.fixture
def transport() -> StubTransport:
    return StubTransport()


@pytest.fixture
def session(credentials, transport, config) -> SessionManager:
    """Session with a context already derived, as after a successful login."""
    manager = SessionManager(credentials, transport=transport, config=config)
    manager.context = Context(
        school_id=83,
        class_id=4821,
        class_number=7,
        class_char="Б",
        edu_year_start=2018,
        edu_year_end=2019,
    )
    return manager


@pytest.fixture
def url() -> Callable[[str], str]:
    return lambda path: f"{BASE_URL}{path}"
