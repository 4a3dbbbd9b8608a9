"""Root pytest configuration for seaweed-blobs tests."""
import pytest

from seaweed_blobs.client import SeaweedClient
from seaweed_blobs.settings import Settings
from seaweed_blobs.storage.fakes import FakeCluster


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "slow: mark test as slow (may take significant time)"
    )


# Set up test environment variables
@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Automatically set up test environment variables."""
    monkeypatch.setenv("SEAWEED_MASTER_ADDR", "master:9333")
    monkeypatch.delenv("SEAWEED_HTTP_TIMEOUT", raising=False)
    monkeypatch.delenv("SEAWEED_REPLICATION", raising=False)
    monkeypatch.delenv("SEAWEED_TTL", raising=False)


# Standardized test fixtures
@pytest.fixture
def settings():
    """Standard test settings pointing at the fake master."""
    return Settings(master_addr="master:9333")


@pytest.fixture
def cluster():
    """Fake cluster with one volume on one server."""
    return FakeCluster()


@pytest.fixture
def replicated_cluster():
    """Fake cluster with volume 7 replicated on two servers."""
    return FakeCluster(volumes={"7": ["10.0.0.1:8080", "10.0.0.2:8080"]})


@pytest.fixture
def client(settings, cluster):
    """Client wired to the fake cluster."""
    with SeaweedClient(settings, transport=cluster.transport()) as c:
        yield c
