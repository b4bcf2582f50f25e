"""Base data adapter — Abstract interface an ORM layer drives.

Every storage backend implements this interface. The adapter is responsible for:
  1. Registering and tearing down named connections
  2. Creating and dropping the storage for a collection
  3. Translating ORM criteria into backend queries
  4. Mapping backend responses back to plain records

All operations take the connection name and collection name first, and data
operations accept an ``index`` override that replaces the configured target.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from elastorm.adapters.base.registry import ConnectionRegistry
from elastorm.core.mapper import Record
from elastorm.models.collection import AttributeDefinition, CollectionDefinition
from elastorm.models.connection import ConnectionConfig
from elastorm.models.criteria import Criteria


class AdapterHealth(BaseModel):
    """Health status of a connection."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class DataAdapter(ABC):
    """Abstract base class for ORM storage adapters.

    Connection state lives in the ``ConnectionRegistry`` handed to the
    constructor; the adapter itself holds no per-connection state.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self.registry = registry

    @property
    @abstractmethod
    def identity(self) -> str:
        """Unique adapter name (e.g., 'elasticsearch')."""

    async def register_connection(
        self,
        connection: ConnectionConfig | Mapping[str, Any],
        collections: Mapping[str, CollectionDefinition | Mapping[str, Any]] | None = None,
    ) -> Any:
        """Register a connection and return its client handle."""
        record = await self.registry.register(connection, collections)
        return record.client

    async def teardown(self, identity: str | None = None) -> None:
        """Tear down one connection, or all of them when ``identity`` is None."""
        await self.registry.teardown(identity)

    async def describe(self, connection_name: str, collection_name: str) -> dict[str, AttributeDefinition]:
        """Return the declared attributes of a collection."""
        return dict(self.registry.collection(connection_name, collection_name).attributes)

    @abstractmethod
    async def define(
        self,
        connection_name: str,
        collection_name: str,
        definition: Mapping[str, Any] | None = None,
        index: str | None = None,
    ) -> Any:
        """Create the storage for a collection."""

    @abstractmethod
    async def drop(
        self,
        connection_name: str,
        collection_name: str,
        relations: list[str] | None = None,
        index: str | None = None,
    ) -> None:
        """Remove the storage for a collection."""

    @abstractmethod
    async def find(
        self,
        connection_name: str,
        collection_name: str,
        criteria: Criteria | Mapping[str, Any] | None,
        index: str | None = None,
    ) -> list[Record]:
        """Return records matching ``criteria``."""

    @abstractmethod
    async def create(
        self,
        connection_name: str,
        collection_name: str,
        values: dict[str, Any],
        index: str | None = None,
    ) -> Record:
        """Store a new record and return it as stored."""

    @abstractmethod
    async def update(
        self,
        connection_name: str,
        collection_name: str,
        criteria: Criteria | Mapping[str, Any],
        values: dict[str, Any],
        index: str | None = None,
    ) -> Record:
        """Update the record selected by primary key and return it."""

    @abstractmethod
    async def destroy(
        self,
        connection_name: str,
        collection_name: str,
        criteria: Criteria | Mapping[str, Any],
        index: str | None = None,
    ) -> None:
        """Delete the record selected by primary key."""

    @abstractmethod
    async def health_check(self, connection_name: str) -> AdapterHealth:
        """Check the health of a connection's backend."""
