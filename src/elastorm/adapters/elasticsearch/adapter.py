"""Elasticsearch adapter — ORM CRUD on top of ``AsyncElasticsearch`` (v8+).

Each collection is stored in one index: the ``index`` argument of an
operation if given, otherwise the connection's configured ``index``,
otherwise the collection name. Records are the document ``_source`` with
the document id injected under ``_id``.

``create`` and ``update`` write and then read the document back in a
second request. The two steps are not atomic: if the read fails the write
has still happened.

Client errors propagate unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from elastorm.adapters.base.adapter import AdapterHealth, DataAdapter
from elastorm.adapters.base.exceptions import IndexAlreadyExistsError, MissingPrimaryKeyError
from elastorm.adapters.base.registry import ConnectionRegistry
from elastorm.core.mapper import ID_FIELD, Record, docs_to_records, hit_to_record, hits_to_records
from elastorm.core.query import build_search_body
from elastorm.core.restrict import restrict_attributes
from elastorm.models.criteria import Criteria

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY_LIMIT = 100


def _body(response: Any) -> Any:
    """Unwrap a transport response to its decoded body."""
    return getattr(response, "body", response)


class ElasticsearchAdapter(DataAdapter):
    """Data adapter for Elasticsearch.

    Args:
        registry: Registry owning the connections this adapter operates on.
        concurrency_limit: Maximum in-flight requests for batch operations.
    """

    def __init__(self, registry: ConnectionRegistry, concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT) -> None:
        super().__init__(registry)
        self.concurrency_limit = max(1, concurrency_limit)

    @property
    def identity(self) -> str:
        return "elasticsearch"

    def _target(self, connection_name: str, collection_name: str, index: str | None) -> tuple[Any, str]:
        client = self.registry.client(connection_name)
        return client, self.registry.resolve_index(connection_name, collection_name, index)

    def _restrict(self, connection_name: str, collection_name: str, values: dict[str, Any]) -> dict[str, Any]:
        collection = self.registry.collection(connection_name, collection_name)
        restrict_attributes(collection.attributes, values)
        return {key: value for key, value in values.items() if key != ID_FIELD}

    def _primary_key(self, connection_name: str, collection_name: str, criteria: Any) -> Any:
        field = self.registry.collection(connection_name, collection_name).primary_key
        where = Criteria.coerce(criteria).where or {}
        value = where.get(field)
        if value is None:
            raise MissingPrimaryKeyError(f"You must specify the primary key ('{field}') of the record.")
        return value

    # ── Index management ─────────────────────────────────────────────────

    async def create_index(
        self,
        connection_name: str,
        collection_name: str,
        settings: Mapping[str, Any] | None = None,
        index: str | None = None,
    ) -> dict[str, Any]:
        """Create the collection's index.

        Raises:
            IndexAlreadyExistsError: If the index exists already.
        """
        client, index_name = self._target(connection_name, collection_name, index)

        if await client.indices.exists(index=index_name):
            raise IndexAlreadyExistsError(f"Index '{index_name}' already exists.")

        kwargs: dict[str, Any] = {"index": index_name}
        if settings is not None:
            kwargs["settings"] = dict(settings)

        response = await client.indices.create(**kwargs)
        logger.info("Created index: %s", index_name)
        return dict(_body(response))

    async def put_mapping(
        self,
        connection_name: str,
        collection_name: str,
        index: str | None = None,
    ) -> dict[str, Any] | None:
        """Send the ``mapping`` of every attribute that declares one.

        Returns ``None`` without a request when no attribute declares a mapping.
        """
        client, index_name = self._target(connection_name, collection_name, index)
        properties = self.registry.collection(connection_name, collection_name).mappings()

        if not properties:
            logger.info("No mapping defined for the '%s' index", index_name)
            return None

        response = await client.indices.put_mapping(index=index_name, properties=properties)
        logger.info("Put mapping for %d fields on index: %s", len(properties), index_name)
        return dict(_body(response))

    async def define(
        self,
        connection_name: str,
        collection_name: str,
        definition: Mapping[str, Any] | None = None,
        index: str | None = None,
    ) -> dict[str, Any] | None:
        """Create the index and put the declared field mappings.

        ``definition`` is used as the index settings.
        """
        await self.create_index(connection_name, collection_name, settings=definition, index=index)
        return await self.put_mapping(connection_name, collection_name, index=index)

    async def drop(
        self,
        connection_name: str,
        collection_name: str,
        relations: list[str] | None = None,
        index: str | None = None,
    ) -> None:
        """Delete the collection's index. A missing index is not an error."""
        client, index_name = self._target(connection_name, collection_name, index)
        await client.indices.delete(index=index_name, ignore_unavailable=True)
        logger.info("Dropped index: %s", index_name)

    # ── Queries ──────────────────────────────────────────────────────────

    async def find(
        self,
        connection_name: str,
        collection_name: str,
        criteria: Criteria | Mapping[str, Any] | None,
        index: str | None = None,
    ) -> list[Record]:
        """Search with term filters built from ``criteria``."""
        client, index_name = self._target(connection_name, collection_name, index)
        body = build_search_body(criteria)
        logger.debug("Searching %s: %s", index_name, body)

        response = await client.search(index=index_name, body=body)
        return hits_to_records(_body(response))

    async def get(
        self,
        connection_name: str,
        collection_name: str,
        primary_key: Any,
        index: str | None = None,
    ) -> Record:
        """Get one record by id. A missing document raises the client's ``NotFoundError``."""
        client, index_name = self._target(connection_name, collection_name, index)
        response = await client.get(index=index_name, id=primary_key)
        return hit_to_record(_body(response))

    async def mget(
        self,
        connection_name: str,
        collection_name: str,
        primary_keys: list[Any],
        index: str | None = None,
    ) -> list[Record | bool]:
        """Get several records by id; missing ones come back as ``False``."""
        client, index_name = self._target(connection_name, collection_name, index)
        if not primary_keys:
            return []
        response = await client.mget(index=index_name, ids=list(primary_keys))
        return docs_to_records(_body(response))

    # ── Writes ───────────────────────────────────────────────────────────

    async def create(
        self,
        connection_name: str,
        collection_name: str,
        values: dict[str, Any],
        index: str | None = None,
    ) -> Record:
        """Index a new document and return it as stored.

        A value under ``_id`` is used as the document id; otherwise
        Elasticsearch generates one.
        """
        client, index_name = self._target(connection_name, collection_name, index)
        document = self._restrict(connection_name, collection_name, values)

        kwargs: dict[str, Any] = {"index": index_name, "document": document}
        if values.get(ID_FIELD) is not None:
            kwargs["id"] = values[ID_FIELD]

        created = _body(await client.index(**kwargs))
        response = await client.get(index=index_name, id=created[ID_FIELD])
        return hit_to_record(_body(response))

    async def create_each(
        self,
        connection_name: str,
        collection_name: str,
        values_list: list[dict[str, Any]],
        index: str | None = None,
    ) -> list[Record]:
        """Create several records concurrently, returned in input order.

        The first failure cancels the creates still pending and is raised
        as-is. Records already written stay written.
        """
        semaphore = asyncio.Semaphore(self.concurrency_limit)

        async def _create(values: dict[str, Any]) -> Record:
            async with semaphore:
                return await self.create(connection_name, collection_name, values, index=index)

        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(_create(values)) for values in values_list]
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from None

        return [task.result() for task in tasks]

    async def update(
        self,
        connection_name: str,
        collection_name: str,
        criteria: Criteria | Mapping[str, Any],
        values: dict[str, Any],
        index: str | None = None,
    ) -> Record:
        """Partially update the record whose primary key is in ``criteria.where``.

        Raises:
            MissingPrimaryKeyError: If the criteria carry no primary key value.
        """
        client, index_name = self._target(connection_name, collection_name, index)
        primary_key = self._primary_key(connection_name, collection_name, criteria)
        document = self._restrict(connection_name, collection_name, values)

        updated = _body(await client.update(index=index_name, id=primary_key, doc=document))
        response = await client.get(index=index_name, id=updated[ID_FIELD])
        return hit_to_record(_body(response))

    async def destroy(
        self,
        connection_name: str,
        collection_name: str,
        criteria: Criteria | Mapping[str, Any],
        index: str | None = None,
    ) -> None:
        """Delete the record whose primary key is in ``criteria.where``.

        Raises:
            MissingPrimaryKeyError: If the criteria carry no primary key value.
        """
        primary_key = self._primary_key(connection_name, collection_name, criteria)
        await self.delete(connection_name, collection_name, primary_key, index=index)

    async def delete(
        self,
        connection_name: str,
        collection_name: str,
        primary_key: Any,
        index: str | None = None,
    ) -> None:
        """Delete one record by id.

        Raises:
            MissingPrimaryKeyError: If ``primary_key`` is None.
        """
        if primary_key is None:
            raise MissingPrimaryKeyError("You must specify the primary key of the record you wish to delete.")
        client, index_name = self._target(connection_name, collection_name, index)
        await client.delete(index=index_name, id=primary_key)

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self, connection_name: str) -> AdapterHealth:
        """Check the cluster health behind a connection."""
        record = self.registry.get(connection_name)
        if record.client is None:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            health = _body(await record.client.cluster.health())
            latency_ms = int((time.monotonic() - start) * 1000)

            status_map = {"green": "healthy", "yellow": "degraded", "red": "unhealthy"}

            return AdapterHealth(
                status=status_map.get(health.get("status", "red"), "unhealthy"),
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Cluster: {health.get('cluster_name')}, Nodes: {health.get('number_of_nodes')}",
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))
