"""Criteria model — which records to match, sort and paginate."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Criteria(BaseModel):
    """ORM-level query criteria.

    ``where`` maps a field path to an equality value, or to a list of values
    for set membership. Dotted paths address fields inside nested documents.
    ``sort`` is ordered; ``1`` (or ``"asc"``) sorts ascending.
    """

    where: dict[str, Any] | None = Field(default=None, description="Field path to value(s)")
    sort: dict[str, Any] | None = Field(default=None, description="Ordered field to direction")
    skip: int | None = Field(default=None, ge=0, description="Result window offset")
    limit: int | None = Field(default=None, ge=0, description="Result window size")

    @classmethod
    def coerce(cls, value: Criteria | dict[str, Any] | None) -> Criteria:
        """Accept a ``Criteria``, a plain mapping or ``None``."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls.model_validate(value)
