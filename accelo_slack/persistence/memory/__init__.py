"""In-memory persistence backend."""

from .memory_store import MemoryMessageStore, MemoryUserDirectory

__all__ = ["MemoryMessageStore", "MemoryUserDirectory"]
