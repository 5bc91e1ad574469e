"""JSON file persistence backend."""

from .file_manager import FileManager
from .json_store import JsonMessageStore, JsonUserDirectory

__all__ = ["FileManager", "JsonMessageStore", "JsonUserDirectory"]
