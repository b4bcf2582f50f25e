"""elastorm — ORM-style CRUD adapter for Elasticsearch."""

__version__ = "0.1.0"
