"""Response mapping — Elasticsearch hits and docs to plain records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

ID_FIELD = "_id"

Record = dict[str, Any]


def hit_to_record(hit: Mapping[str, Any]) -> Record:
    """Return the hit's source with its document id injected under ``_id``."""
    record = dict(hit.get("_source") or {})
    record[ID_FIELD] = hit[ID_FIELD]
    return record


def total_hits(response: Mapping[str, Any]) -> int | None:
    """Read the hit total from either the v7+ object form or a bare integer.

    Returns ``None`` when the response carries no total (``track_total_hits: false``).
    """
    total = response.get("hits", {}).get("total")
    if total is None:
        return None
    if isinstance(total, Mapping):
        return int(total.get("value", 0))
    return int(total)


def hits_to_records(response: Mapping[str, Any]) -> list[Record]:
    """Map a search response to records, in hit order."""
    hits = response.get("hits", {}).get("hits") or []
    if total_hits(response) == 0 or not hits:
        return []
    return [hit_to_record(hit) for hit in hits]



def docs_to_records(response: Mapping[str, Any]) -> list[Record | bool]:
    """Map a multi-get response, substituting ``False`` for missing docs.

    The output is positionally aligned with the requested ids.
    """
    return [hit_to_record(doc) if doc.get("found") else False for doc in response.get("docs", [])]
