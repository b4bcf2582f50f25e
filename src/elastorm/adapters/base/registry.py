"""Connection Registry — Owns registered connections and their client handles.

A registry is created by the caller and handed to the adapter, so several
independent registries can coexist in one process. Each entry holds the raw
connection config, the collections bound to it and the live client handle.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from elastorm.adapters.base.exceptions import (
    CollectionNotFoundError,
    ConfigurationError,
    ConnectionAlreadyRegisteredError,
    ConnectionNotFoundError,
)
from elastorm.models.collection import CollectionDefinition
from elastorm.models.connection import ConnectionConfig

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ConnectionConfig], Awaitable[Any]]


@dataclass
class ConnectionRecord:
    """A registered connection. ``client`` is ``None`` until the handle resolves."""

    config: ConnectionConfig
    collections: dict[str, CollectionDefinition] = field(default_factory=dict)
    client: Any = None


class ConnectionRegistry:
    """Registry mapping connection identities to their records.

    Example:
        >>> registry = ConnectionRegistry(connect)
        >>> await registry.register(ConnectionConfig(identity="main"), {"user": user_def})
        >>> registry.client("main")
    """

    def __init__(self, client_factory: ClientFactory) -> None:
        self._client_factory = client_factory
        self._records: dict[str, ConnectionRecord] = {}

    async def register(
        self,
        config: ConnectionConfig | Mapping[str, Any],
        collections: Mapping[str, CollectionDefinition | Mapping[str, Any]] | None = None,
    ) -> ConnectionRecord:
        """Register a connection and open its client.

        Args:
            config: Connection configuration; must carry an ``identity``.
            collections: Collections bound to this connection, by name.

        Returns:
            The registered record, with its client set.

        Raises:
            ConfigurationError: If the identity is missing.
            ConnectionAlreadyRegisteredError: If the identity is already registered.
        """
        if not isinstance(config, ConnectionConfig):
            config = ConnectionConfig.model_validate(config)
        identity = config.identity
        if not identity:
            raise ConfigurationError("Connection is missing an identity.")
        if identity in self._records:
            raise ConnectionAlreadyRegisteredError(f"Connection '{identity}' is already registered.")

        record = ConnectionRecord(config=config, collections=_coerce_collections(collections))
        self._records[identity] = record

        try:
            client = await self._client_factory(config)
        except Exception:
            if self._records.get(identity) is record:
                del self._records[identity]
            raise

        if self._records.get(identity) is not record:
            await client.close()
            raise ConnectionNotFoundError(f"Connection '{identity}' was torn down while connecting.")

        record.client = client
        logger.info("Registered connection: %s (%d collections)", identity, len(record.collections))
        return record

    async def teardown(self, identity: str | None = None) -> None:
        """Remove one connection, or every connection when ``identity`` is None.

        Unknown identities are ignored. Removed clients are closed.
        """
        if identity is None:
            records = list(self._records.items())
            self._records.clear()
        elif identity in self._records:
            records = [(identity, self._records.pop(identity))]
        else:
            return

        for name, record in records:
            if record.client is None:
                continue
            try:
                await record.client.close()
            except Exception:
                logger.warning("Error closing client for connection: %s", name, exc_info=True)
            logger.info("Tore down connection: %s", name)

    def get(self, identity: str) -> ConnectionRecord:
        """Get a registered connection.

        Raises:
            ConnectionNotFoundError: If nothing is registered under ``identity``.
        """
        if identity not in self._records:
            raise ConnectionNotFoundError(
                f"Connection '{identity}' is not registered. Registered connections: {self.identities}"
            )
        return self._records[identity]

    def client(self, identity: str) -> Any:
        """Get the live client handle of a connection."""
        record = self.get(identity)
        if record.client is None:
            raise ConnectionNotFoundError(f"Connection '{identity}' has no client yet.")
        return record.client

    def collection(self, identity: str, name: str) -> CollectionDefinition:
        """Get a collection definition bound to a connection."""
        record = self.get(identity)
        if name not in record.collections:
            raise CollectionNotFoundError(f"Collection '{name}' is not registered on connection '{identity}'.")
        return record.collections[name]

    def resolve_index(self, identity: str, collection: str, index: str | None = None) -> str:
        """Pick the index for an operation.

        An explicit ``index`` wins, then the connection's configured index,
        then the collection name.
        """
        if index is not None:
            return index
        config = self.get(identity).config
        return config.index if config.index is not None else collection

    def __contains__(self, identity: object) -> bool:
        return identity in self._records

    def __len__(self) -> int:
        return len(self._records)

    @property
    def identities(self) -> list[str]:
        """List all registered connection identities."""
        return list(self._records.keys())


def _coerce_collections(
    collections: Mapping[str, CollectionDefinition | Mapping[str, Any]] | None,
) -> dict[str, CollectionDefinition]:
    result: dict[str, CollectionDefinition] = {}
    for name, definition in (collections or {}).items():
        if isinstance(definition, CollectionDefinition):
            result[name] = definition
        else:
            result[name] = CollectionDefinition.model_validate({"identity": name, **definition})
    return result
