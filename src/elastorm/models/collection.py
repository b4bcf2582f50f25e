"""Collection (model) definitions as declared by the ORM layer."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

JSON_TYPE = "json"


class AttributeDefinition(BaseModel):
    """A single model attribute.

    Only ``json`` attributes take part in sub-field restriction; ``mapping``
    is sent verbatim as the Elasticsearch field mapping.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: str | None = Field(default=None, description="ORM attribute type (e.g. 'string', 'json')")
    mapping: dict[str, Any] | None = Field(default=None, description="Elasticsearch field mapping")
    restrict_attributes: list[str] | None = Field(
        default=None,
        alias="restrictAttributes",
        description="Sub-fields of a json attribute to keep",
    )
    skip_attributes: list[str] | None = Field(
        default=None,
        alias="skipAttributes",
        description="Sub-fields of a json attribute to drop",
    )

    @property
    def is_json(self) -> bool:
        return self.type == JSON_TYPE


class CollectionDefinition(BaseModel):
    """Metadata for one collection registered on a connection."""

    model_config = ConfigDict(populate_by_name=True)

    identity: str = Field(description="Collection name")
    primary_key: str = Field(default="_id", alias="primaryKey", description="Primary key field name")
    attributes: dict[str, AttributeDefinition] = Field(default_factory=dict, description="Declared attributes")
    connection: str | None = Field(default=None, description="Connection name (used by config files)")

    def mappings(self) -> dict[str, dict[str, Any]]:
        """Return the Elasticsearch properties declared through ``mapping``."""
        return {name: attr.mapping for name, attr in self.attributes.items() if attr.mapping is not None}
