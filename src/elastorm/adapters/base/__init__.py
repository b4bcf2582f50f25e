"""Base adapter interface — Abstract classes for ORM storage connectors."""

from elastorm.adapters.base.adapter import DataAdapter
from elastorm.adapters.base.registry import ConnectionRecord, ConnectionRegistry

__all__ = ["ConnectionRecord", "ConnectionRegistry", "DataAdapter"]
