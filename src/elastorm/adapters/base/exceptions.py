"""Adapter-specific exceptions."""


class AdapterError(Exception):
    """Base exception for adapter errors."""


class ConfigurationError(AdapterError):
    """Raised when adapter or connection configuration is invalid."""


class ConnectionAlreadyRegisteredError(AdapterError):
    """Raised when a connection identity is registered twice."""


class ConnectionNotFoundError(AdapterError):
    """Raised when an operation names a connection that is not registered."""


class CollectionNotFoundError(AdapterError):
    """Raised when a collection is not known to its connection."""


class MissingPrimaryKeyError(AdapterError):
    """Raised when a single-record operation has no primary key value."""


class IndexAlreadyExistsError(AdapterError):
    """Raised when creating an index that already exists."""
