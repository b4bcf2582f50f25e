"""Query translation — ORM criteria to an Elasticsearch search body.

Every ``where`` entry becomes exactly one term (scalar) or terms (list)
filter. Dotted field paths are wrapped in one ``nested`` clause per parent
segment, outermost first, so ``a.b.c`` produces ``nested(a)`` →
``nested(a.b)`` → ``term(a.b.c)``.

Fields are not checked against the index mapping; term filters only match
as expected on keyword (not analyzed) fields.
"""

from __future__ import annotations

from typing import Any

from elastorm.models.criteria import Criteria

_MULTI_VALUE_TYPES = (list, tuple, set, frozenset)


def term_or_terms(field: str, value: Any) -> dict[str, Any]:
    """Build a ``terms`` filter for multiple values, ``term`` otherwise."""
    if isinstance(value, _MULTI_VALUE_TYPES):
        return {"terms": {field: list(value)}}
    return {"term": {field: value}}


def nested_filter(field: str, value: Any) -> dict[str, Any]:
    """Build the filter for ``field``, wrapping nested paths as needed."""
    leaf = term_or_terms(field, value)
    parents = field.split(".")[:-1]
    if not parents:
        return leaf

    paths = [".".join(parents[: i + 1]) for i in range(len(parents))]
    clause: dict[str, Any] = {"bool": {"filter": leaf}}
    for path in reversed(paths):
        clause = {"nested": {"path": path, "query": clause}}
    return clause


def sort_order(direction: Any) -> str:
    """Map an ORM sort direction to ``asc``/``desc``."""
    if isinstance(direction, str):
        return "asc" if direction.strip().lower() == "asc" else "desc"
    return "asc" if direction == 1 else "desc"


def build_query(where: dict[str, Any] | None) -> dict[str, Any]:
    """Build the ``query`` part of a search body."""
    if not where:
        return {"match_all": {}}
    return {"bool": {"filter": [nested_filter(field, value) for field, value in where.items()]}}


def build_search_body(criteria: Criteria | dict[str, Any] | None) -> dict[str, Any]:
    """Translate criteria into a complete search request body.

    Args:
        criteria: ``Criteria`` or an equivalent mapping.

    Returns:
        Body with ``query`` and, when requested, ``sort``, ``from`` and ``size``.
    """
    criteria = Criteria.coerce(criteria)
    body: dict[str, Any] = {"query": build_query(criteria.where)}

    if criteria.skip is not None:
        body["from"] = criteria.skip
    if criteria.limit is not None:
        body["size"] = criteria.limit

    if criteria.sort:
        body["sort"] = [{field: {"order": sort_order(direction)}} for field, direction in criteria.sort.items()]

    return body
