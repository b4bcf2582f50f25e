"""Client construction for Elasticsearch connections."""

from __future__ import annotations

import logging
from typing import Any

from elasticsearch import AsyncElasticsearch

from elastorm.models.connection import ConnectionConfig

logger = logging.getLogger(__name__)


def client_kwargs(config: ConnectionConfig) -> dict[str, Any]:
    """Build ``AsyncElasticsearch`` keyword arguments from a connection config."""
    kwargs: dict[str, Any] = {
        "hosts": config.hosts,
        "verify_certs": config.verify_certs,
    }
    if config.api_key:
        kwargs["api_key"] = config.api_key
    elif config.username and config.password:
        kwargs["basic_auth"] = (config.username, config.password)

    kwargs.update(config.extra)
    return kwargs


async def connect(config: ConnectionConfig) -> AsyncElasticsearch:
    """Create the client for a connection.

    The client connects lazily; with ``verify_on_connect`` the info API is
    called once so a misconfigured cluster fails at registration.
    """
    client = AsyncElasticsearch(**client_kwargs(config))
    if config.verify_on_connect:
        try:
            info = await client.info()
        except Exception:
            await client.close()
            raise
        logger.info(
            "Connected to Elasticsearch cluster: %s (v%s)",
            info.get("cluster_name", "unknown"),
            info.get("version", {}).get("number", "unknown"),
        )
    return client
