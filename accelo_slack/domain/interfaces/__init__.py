"""
Domain interfaces.

Defines the contracts that the persistence layer must implement.
"""

from .message_store import IMessageStore, MessageRef
from .user_directory import DirectoryUser, IUserDirectory, find_user

__all__ = [
    "DirectoryUser",
    "IMessageStore",
    "IUserDirectory",
    "MessageRef",
    "find_user",
]
