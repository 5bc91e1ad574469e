"""Accelo API access: client primitive, paginated fetcher, resource clients."""

from .client import PAGE_SIZE, AcceloClient, fetch_access_token
from .links import AcceloLinks
from .resources import AcceloAPI, ResourceClient

__all__ = [
    "PAGE_SIZE",
    "AcceloAPI",
    "AcceloClient",
    "AcceloLinks",
    "ResourceClient",
    "fetch_access_token",
]
