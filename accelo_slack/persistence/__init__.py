"""
Persistence backends for the message store and user directory.

memory (default), json files, redis.
"""

from .store_factory import Stores, close_stores, create_stores

__all__ = ["Stores", "close_stores", "create_stores"]
