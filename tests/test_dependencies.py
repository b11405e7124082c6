"""
Tests for the composition root and application lifespan.
"""

import pytest
from fastapi.testclient import TestClient

from pattern_intel.core.config import settings
from pattern_intel.infrastructure.patterns.http_vector_index import (
    HttpVectorIndexAdapter,
)
from pattern_intel.infrastructure.patterns.in_memory_vector_index import (
    InMemoryVectorIndexAdapter,
)
from pattern_intel.interfaces.patterns.dependencies import (
    get_http_client,
    get_vector_index,
)
from pattern_intel.main import app


@pytest.fixture
def fresh_factories():
    """Clear cached adapters before and after the test."""
    get_vector_index.cache_clear()
    get_http_client.cache_clear()
    yield
    get_vector_index.cache_clear()
    get_http_client.cache_clear()


class TestVectorIndexFactory:
    def test_memory_backend_by_default(self, monkeypatch, fresh_factories) -> None:
        monkeypatch.setattr(settings, "vector_index_backend", "memory")

        assert isinstance(get_vector_index(), InMemoryVectorIndexAdapter)
        assert get_http_client.cache_info().currsize == 0

    def test_http_backend_reuses_one_client(self, monkeypatch, fresh_factories) -> None:
        monkeypatch.setattr(settings, "vector_index_backend", "http")

        index = get_vector_index()

        assert isinstance(index, HttpVectorIndexAdapter)
        assert index._client is get_http_client()
        assert get_vector_index() is index

    def test_shutdown_closes_shared_client(self, monkeypatch, fresh_factories) -> None:
        monkeypatch.setattr(settings, "vector_index_backend", "http")
        client = get_vector_index()._client

        with TestClient(app):
            assert client.is_closed is False

        assert client.is_closed is True
