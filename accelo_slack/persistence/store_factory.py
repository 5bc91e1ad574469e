"""
Store factory selector.

Builds the message store and user directory for the configured STORE_TYPE.
"""

from dataclasses import dataclass

from ..core.config.settings import Settings
from ..core.types import StoreType, validate_store_type
from ..domain.interfaces import IMessageStore, IUserDirectory


@dataclass
class Stores:
    """The two stores the relay needs, built from one backend."""

    messages: IMessageStore
    users: IUserDirectory
    store_type: StoreType


def create_stores(settings: Settings) -> Stores:
    """
    Create the message store and user directory for ``settings.store_type``.

    Raises:
        ValueError: If the store type is unknown, or redis is selected
            without REDIS_URL
    """
    store_type = validate_store_type(settings.store_type)

    if store_type is StoreType.REDIS:
        if not settings.redis_url:
            raise ValueError(
                "Redis URL not configured. Set REDIS_URL environment variable "
                "or use a different STORE_TYPE"
            )
        from .redis import RedisClient, RedisMessageStore, RedisUserDirectory

        redis = RedisClient.setup(settings.redis_url)
        return Stores(RedisMessageStore(redis), RedisUserDirectory(redis), store_type)

    if store_type is StoreType.JSON:
        from .json import FileManager, JsonMessageStore, JsonUserDirectory

        file_manager = FileManager(settings.store_dir)
        return Stores(
            JsonMessageStore(file_manager), JsonUserDirectory(file_manager), store_type
        )

    from .memory import MemoryMessageStore, MemoryUserDirectory

    return Stores(MemoryMessageStore(), MemoryUserDirectory(), store_type)


async def close_stores(stores: Stores) -> None:
    """Release backend connections held by the stores."""
    if stores.store_type is StoreType.REDIS:
        from .redis import RedisClient

        await RedisClient.close()
