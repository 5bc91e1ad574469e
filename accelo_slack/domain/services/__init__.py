"""Domain services: request actions, link unfurls, user matching."""

from .request_service import RequestService
from .unfurl_resolver import LinkUnfurlResolver, extract_link_id
from .user_sync import sync_users

__all__ = ["LinkUnfurlResolver", "RequestService", "extract_link_id", "sync_users"]
