"""Accelo API client."""

from .accelo_client import PAGE_SIZE, AcceloClient, AcceloUrlBuilder, fetch_access_token

__all__ = ["PAGE_SIZE", "AcceloClient", "AcceloUrlBuilder", "fetch_access_token"]
