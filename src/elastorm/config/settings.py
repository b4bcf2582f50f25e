"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (ELASTORM_ prefix)
  2. YAML config file (if specified)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from elastorm.models.collection import CollectionDefinition
from elastorm.models.connection import ConnectionConfig


class AdapterSettings(BaseModel):
    """Adapter behavior configuration."""

    concurrency_limit: int = Field(default=100, ge=1, description="Max in-flight requests for batch operations")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root settings.

    Configuration is loaded from environment variables with the ELASTORM_ prefix.
    Nested settings use double underscores: ELASTORM_ADAPTER__CONCURRENCY_LIMIT=50

    Example:
        ELASTORM_ADAPTER__CONCURRENCY_LIMIT=50
        ELASTORM_OBSERVABILITY__LOG_FORMAT=console
    """

    model_config = {
        "env_prefix": "ELASTORM_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    adapter: AdapterSettings = Field(default_factory=AdapterSettings)
    connections: dict[str, ConnectionConfig] = Field(default_factory=dict, description="Connections by identity")
    collections: dict[str, CollectionDefinition] = Field(default_factory=dict, description="Collections by name")
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @field_validator("collections", mode="before")
    @classmethod
    def _name_collections(cls, v: Any) -> Any:
        """Default each collection's identity to its key."""
        if isinstance(v, dict):
            return {
                name: {"identity": name, **collection} if isinstance(collection, dict) else collection
                for name, collection in v.items()
            }
        return v

    def connection_configs(self) -> list[ConnectionConfig]:
        """Return connection configs with ``identity`` filled from their key."""
        return [
            config if config.identity else config.model_copy(update={"identity": name})
            for name, config in self.connections.items()
        ]

    def collections_for(self, connection: str) -> dict[str, CollectionDefinition]:
        """Return the collections bound to ``connection``.

        Collections without an explicit connection bind to the only configured
        connection, when there is exactly one.
        """
        default = next(iter(self.connections)) if len(self.connections) == 1 else None
        return {
            name: collection
            for name, collection in self.collections.items()
            if (collection.connection or default) == connection
        }

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are used as defaults; environment variables
        still take precedence.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
