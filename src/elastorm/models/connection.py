"""Connection configuration model."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field, field_validator


class ConnectionConfig(BaseModel):
    """Configuration for a single Elasticsearch connection.

    ``identity`` is the key the connection is registered under. Everything
    else except ``index`` and ``verify_on_connect`` is forwarded to the client.
    """

    identity: str | None = Field(default=None, description="Unique connection name")
    hosts: list[str] = Field(default_factory=lambda: ["http://localhost:9200"], description="Cluster node URLs")
    index: str | None = Field(default=None, description="Index used by every collection on this connection")
    username: str | None = Field(default=None, description="HTTP basic-auth username")
    password: str | None = Field(default=None, description="HTTP basic-auth password")
    api_key: str | None = Field(default=None, description="Encoded API key")
    verify_certs: bool = Field(default=True, description="Whether to verify TLS certificates")
    verify_on_connect: bool = Field(default=False, description="Call the info API when the client is created")
    extra: dict[str, Any] = Field(default_factory=dict, description="Additional client keyword arguments")

    @field_validator("hosts", mode="before")
    @classmethod
    def _parse_hosts(cls, v: Any) -> list[str]:
        """Parse hosts from JSON string (env var) or list."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(h) for h in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            return [v] if v else []
        return list(v)
