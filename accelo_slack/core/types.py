"""
Core type definitions for the Accelo ↔ Slack relay.
"""

from enum import Enum


class StoreType(Enum):
    """
    Supported backends for the message store and user directory.
    """

    MEMORY = "memory"
    """In-memory storage (default) - Fast but not persistent across restarts."""

    REDIS = "redis"
    """Redis-based storage - Persistent and shared, requires Redis server."""

    JSON = "json"
    """JSON file-based storage - Persistent but single-process only."""


def validate_store_type(store_type: str) -> StoreType:
    """
    Validate and convert a store type string to StoreType enum.

    Args:
        store_type: String representation of store type

    Returns:
        Validated StoreType enum value

    Raises:
        ValueError: If store_type is not supported

    Example:
        >>> validate_store_type("redis")
        StoreType.REDIS
    """
    try:
        return StoreType(store_type.lower())
    except ValueError:
        valid_types = [t.value for t in StoreType]
        raise ValueError(
            f"Unsupported store type: {store_type}. Supported types: {valid_types}"
        ) from None
