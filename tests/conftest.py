"""Root pytest configuration for ocistore tests."""
import pytest

from ocistore.settings import Settings
from ocistore.storage.oci_store import OciStore

from .storage.fakes.fake_registry import FakeRegistry

# Import fixtures to make them available
from .fixtures.oci_registry import oci_registry  # noqa: F401


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires Docker)"
    )


# Set up test environment variables
@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Automatically set up test environment variables."""
    monkeypatch.setenv("OCISTORE_LOCATION", "oci://localhost:5000/demo")
    monkeypatch.delenv("OCISTORE_TLS", raising=False)
    monkeypatch.delenv("OCISTORE_TLS_VERIFY", raising=False)
    monkeypatch.delenv("OCISTORE_HTTP_TIMEOUT", raising=False)


# Standardized test fixtures
@pytest.fixture
def settings():
    """Standard test settings."""
    return Settings(location="oci://localhost:5000/demo")


@pytest.fixture
def registry():
    """In-memory registry behind an httpx mock transport."""
    return FakeRegistry()


@pytest.fixture
def store(settings, registry):
    """Store wired to the fake registry."""
    with OciStore(settings, transport=registry.transport()) as s:
        yield s
