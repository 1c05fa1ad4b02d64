"""Root pytest configuration for swiftfs tests."""
import pytest

from swiftfs.settings import ConfigResolver, Settings
from swiftfs.storage.base import ACL
from swiftfs.storage.fakes import FakeObjectStorage, FakeSessionFactory
from swiftfs.wrapper import StreamWrapper

STORAGE_URL = "https://swift.example.com/v1/AUTH_test"


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires a live object store)"
    )


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Keep real credentials in the environment from leaking into tests."""
    for name in ("SWIFT_TOKEN", "SWIFT_STORAGE_URL", "SWIFT_ACCOUNT", "SWIFT_KEY", "SWIFT_AUTH_URL",
                 "SWIFT_HTTP_TIMEOUT", "SWIFT_HTTP_RETRY", "SWIFT_SPOOL_MAX_SIZE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings():
    """Standard test settings with a pre-issued token."""
    return Settings(token="test-token", swift_endpoint=STORAGE_URL)


@pytest.fixture
def storage():
    """Fake object storage with one private and one public container."""
    storage = FakeObjectStorage()
    storage.add_container("photos", acl=ACL.PRIVATE)
    storage.add_container("www", acl=ACL.PUBLIC)
    return storage


@pytest.fixture
def container(storage):
    """The private 'photos' container."""
    return storage.container("photos")


@pytest.fixture
def factory(storage):
    """Session factory handing out the fake storage."""
    return FakeSessionFactory(storage)


@pytest.fixture
def resolver(settings):
    """Resolver with no call-scoped options, defaulting to test settings."""
    return ConfigResolver(defaults=lambda: settings)


@pytest.fixture
def wrapper(settings, factory):
    """Stream wrapper bound to the fake storage."""
    return StreamWrapper(defaults=lambda: settings, factory=factory)
