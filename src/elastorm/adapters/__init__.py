"""Storage adapter layer — ORM-facing connectors for data backends.

Built-in adapters:
  - elasticsearch: Elasticsearch v8+ (term-filtered CRUD over indices)

Implement ``DataAdapter`` to connect your own backend.
"""
