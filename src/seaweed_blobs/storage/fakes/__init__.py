# Fake implementations for testing

from .fake_cluster import FakeCluster, StoredFile

__all__ = ["FakeCluster", "StoredFile"]
