"""Elasticsearch adapter."""

from elastorm.adapters.elasticsearch.adapter import ElasticsearchAdapter
from elastorm.adapters.elasticsearch.connection import connect

__all__ = ["ElasticsearchAdapter", "connect"]
