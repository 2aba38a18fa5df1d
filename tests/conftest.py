"""Root pytest configuration for registry-auth tests."""
import pytest

from registry_auth.client import RegistryClient

from .fakes.fake_registry import FakeRegistry, PASSWORD, REGISTRY_URL, USERNAME

# Import fixtures to make them available
from .fixtures.oci_registry import oci_registry


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires Docker)"
    )


@pytest.fixture(autouse=True)
def test_env(monkeypatch, tmp_path):
    """Isolate tests from the caller's registry environment and Docker config."""
    for name in ("REGISTRY_AUTH_URL", "REGISTRY_AUTH_INSECURE", "REGISTRY_AUTH_USERNAME",
                 "REGISTRY_AUTH_PASSWORD", "REGISTRY_AUTH_HTTP_TIMEOUT", "REGISTRY_AUTH_HTTP_RETRY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("REGISTRY_AUTH_DOCKER_CONFIG", str(tmp_path / "missing-config.json"))


@pytest.fixture
def registry():
    """Fake registry issuing a Bearer challenge."""
    return FakeRegistry()


@pytest.fixture
def client(registry):
    """Registry client with valid credentials wired to the fake registry."""
    return RegistryClient(REGISTRY_URL, credentials=(USERNAME, PASSWORD), transport=registry.transport())
