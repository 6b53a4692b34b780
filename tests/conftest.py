import os
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture

NOW = datetime(2025, 3, 10, 9, 30, tzinfo=UTC)


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Select the configuration environment before the storefront is opened,
    so logging is configured for it.
    """
    os.environ["BITSHUB_ENV"] = session.config.option.env

    from bitshub.config import get_settings

    get_settings.cache_clear()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def bitshub_bed():
    from bitshub.domain import init_domain
    from bitshub.utils.logging import configure_logging

    configure_logging()
    bed = DomainFixture(init_domain())
    yield bed


@pytest.fixture(autouse=True)
def _ctx(bitshub_bed):
    with bitshub_bed.domain_context():
        yield


class FakeClock:
    """A clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    from bitshub.storage.memory_store import MemoryStore

    kv = MemoryStore()
    yield kv
    kv.reset()


@pytest.fixture
def storefront(store, clock):
    from bitshub.store import Storefront

    return Storefront.open(store, clock=clock)


@pytest.fixture
def customer(storefront):
    """A registered, signed-in customer with no addresses."""
    from bitshub.identity.registration import Register
    from bitshub.identity.session import Login

    storefront.dispatch(
        Register(
            full_name="Asha Verma",
            email="asha@example.com",
            password="secret",
            confirm_password="secret",
        )
    )
    storefront.dispatch(Login(email="asha@example.com", password="anything"))
    return storefront.state.current_user


@pytest.fixture
def admin(storefront):
    from bitshub.config import get_settings
    from bitshub.identity.session import Login

    settings = get_settings()
    storefront.dispatch(Login(email=settings.admin_email, password=settings.admin_password))
    return storefront.state.current_user
