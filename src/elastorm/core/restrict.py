"""Attribute restriction for ``json``-typed attributes.

A json attribute may declare ``restrictAttributes`` (sub-fields to keep) and
``skipAttributes`` (sub-fields to drop). Both apply to a single object or to
each object of a list value. Restriction runs before skipping.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from elastorm.models.collection import AttributeDefinition


def _objects(value: Any) -> list[dict[str, Any]]:
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    if isinstance(value, dict):
        return [value]
    return []


def _keep_only(obj: dict[str, Any], keep: Iterable[str]) -> None:
    allowed = set(keep)
    for key in [k for k in obj if k not in allowed]:
        del obj[key]


def _drop(obj: dict[str, Any], skip: Iterable[str]) -> None:
    for key in skip:
        obj.pop(key, None)


def restrict_attributes(
    attributes: Mapping[str, AttributeDefinition],
    values: dict[str, Any],
) -> dict[str, Any]:
    """Apply restrict/skip lists to ``values`` in place and return it."""
    for name, attribute in attributes.items():
        if not attribute.is_json or not values.get(name):
            continue

        targets = _objects(values[name])
        if attribute.restrict_attributes is not None:
            for obj in targets:
                _keep_only(obj, attribute.restrict_attributes)
        if attribute.skip_attributes:
            for obj in targets:
                _drop(obj, attribute.skip_attributes)

    return values
