"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from elastorm.adapters.base.registry import ConnectionRegistry
from elastorm.adapters.elasticsearch.adapter import ElasticsearchAdapter
from elastorm.models.collection import CollectionDefinition
from elastorm.models.connection import ConnectionConfig


def make_client() -> MagicMock:
    """Create a mock ``AsyncElasticsearch`` with async API methods."""
    client = MagicMock()
    for method in ("search", "index", "update", "delete", "get", "mget", "info", "close"):
        setattr(client, method, AsyncMock())
    client.indices = MagicMock()
    for method in ("exists", "create", "put_mapping", "delete"):
        setattr(client.indices, method, AsyncMock())
    client.indices.exists.return_value = False
    client.cluster = MagicMock()
    client.cluster.health = AsyncMock()
    return client


@pytest.fixture
def client() -> MagicMock:
    return make_client()


@pytest.fixture
def client_factory(client: MagicMock) -> AsyncMock:
    """Connection factory that hands out the shared mock client."""
    return AsyncMock(return_value=client)


@pytest.fixture
def registry(client_factory: AsyncMock) -> ConnectionRegistry:
    return ConnectionRegistry(client_factory)


@pytest.fixture
def user_collection() -> CollectionDefinition:
    """A collection with mapped fields and a restricted json attribute."""
    return CollectionDefinition.model_validate(
        {
            "identity": "user",
            "primaryKey": "_id",
            "attributes": {
                "name": {"type": "string", "mapping": {"type": "keyword"}},
                "age": {"type": "integer", "mapping": {"type": "integer"}},
                "profile": {
                    "type": "json",
                    "restrictAttributes": ["bio", "avatar", "secret"],
                    "skipAttributes": ["secret"],
                },
                "notes": {"type": "string"},
            },
        }
    )


@pytest.fixture
def connection_config() -> ConnectionConfig:
    return ConnectionConfig(identity="main", hosts=["http://localhost:9200"])


@pytest.fixture
async def adapter(
    registry: ConnectionRegistry,
    connection_config: ConnectionConfig,
    user_collection: CollectionDefinition,
) -> ElasticsearchAdapter:
    """Adapter with the ``main`` connection registered."""
    a = ElasticsearchAdapter(registry, concurrency_limit=2)
    await a.register_connection(connection_config, {"user": user_collection})
    return a


@pytest.fixture
def sample_hit() -> dict[str, Any]:
    """Sample Elasticsearch hit."""
    return {
        "_index": "user",
        "_id": "u_001",
        "_score": 1.0,
        "_source": {"name": "ada", "age": 36, "profile": {"bio": "analyst"}},
    }
