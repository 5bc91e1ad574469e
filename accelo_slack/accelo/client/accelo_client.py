"""
Accelo REST API client.

Key Design Decisions:
- Pure dependency injection (the aiohttp session is owned by the app lifespan)
- The bearer token is opaque and refreshed out-of-band
- Every call is a fresh round trip; nothing is cached
- Status codes are not inspected, only the body is parsed
"""

import base64
from typing import Any

import aiohttp

from accelo_slack.core.errors import AcceloApiError
from accelo_slack.core.http import HttpResponse
from accelo_slack.core.logging.logger import get_logger

# Accelo caps list pages at 50 items
PAGE_SIZE = 50


class AcceloUrlBuilder:
    """Builds URLs for Accelo API endpoints."""

    def __init__(self, domain: str, api_version: str = "v0"):
        """Initialize URL builder with configuration.

        Args:
            domain: Accelo deployment name (the ``<domain>`` in ``<domain>.accelo.com``)
            api_version: Accelo API version
        """
        self.domain = domain
        self.api_version = api_version
        self.base_url = f"https://{domain}.api.accelo.com"

    def get_endpoint_url(self, endpoint: str) -> str:
        """Build URL for a resource path such as ``requests/42``."""
        return f"{self.base_url}/api/{self.api_version}/{endpoint.strip('/')}"

    def get_token_url(self) -> str:
        """Build URL for the OAuth token endpoint."""
        return f"{self.base_url}/oauth2/{self.api_version}/token"


class AcceloClient:
    """
    Accelo API client with the single-request primitive and the paginated
    collection fetcher every resource operation is built on.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        domain: str,
        access_token: str,
        logger: Any | None = None,
    ):
        """Initialize Accelo client with dependency injection.

        Args:
            session: Persistent aiohttp session (managed by FastAPI lifespan)
            domain: Accelo deployment name
            access_token: Bearer token for the Accelo API
            logger: Pre-configured logger instance
        """
        self.session = session
        self.access_token = access_token
        self.logger = logger or get_logger(__name__)
        self.url_builder = AcceloUrlBuilder(domain)

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

    async def request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> HttpResponse:
        """Send one authenticated request to the Accelo API.

        Args:
            method: HTTP method
            endpoint: Resource path (without base URL)
            params: Optional query parameters
            payload: Optional JSON body

        Returns:
            HttpResponse with status code and body text
        """
        url = self.url_builder.get_endpoint_url(endpoint)
        self.logger.debug(f"{method} {url} params={params} payload={payload}")

        async with self.session.request(
            method, url, headers=self._get_headers(), params=params, json=payload
        ) as response:
            text = await response.text()
            return HttpResponse(status=response.status, text=text, url=url)

    async def request_json(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and parse the JSON envelope.

        Raises:
            AcceloApiError: If the body is not a JSON object
        """
        response = await self.request(method, endpoint, params=params, payload=payload)
        body = response.json(AcceloApiError)
        if not isinstance(body, dict):
            raise AcceloApiError(
                "Unexpected response envelope", status=response.status, url=response.url
            )
        if not response.ok:
            self.logger.warning(
                f"Accelo answered {response.status} for {method} {endpoint}: "
                f"{body.get('meta', {})}"
            )
        return body

    async def get_response(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the unwrapped ``response`` field."""
        body = await self.request_json(method, endpoint, params=params, payload=payload)
        return body.get("response")

    async def fetch_all(
        self,
        endpoint: str,
        fields: str | None = None,
        filters: dict[str, Any] | None = None,
        search: str | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch every page of a collection.

        Pages of PAGE_SIZE are requested until one comes back shorter. A
        collection whose size is an exact multiple of PAGE_SIZE therefore
        costs one extra round trip for the trailing empty page.

        Args:
            endpoint: Collection path (e.g. ``requests`` or ``activities/threads``)
            fields: Comma separated fields and linked objects
            filters: Filter names and values, passed through as-is
            search: Search string

        Returns:
            All items, in the order the server returned them

        Raises:
            AcceloApiError: If a page body is not JSON or has no item list
        """
        payload: dict[str, Any] = {}
        if fields:
            payload["_fields"] = fields
        if filters:
            payload["_filters"] = filters
        if search:
            payload["_search"] = search

        items: list[dict[str, Any]] = []
        page = 0
        while True:
            params = {"_method": "get", "_limit": PAGE_SIZE, "_page": page}
            page_items = await self.get_response(
                "POST", endpoint, params=params, payload=payload
            )
            if not isinstance(page_items, list):
                raise AcceloApiError(
                    f"Expected a list of items from {endpoint} page {page}",
                    url=self.url_builder.get_endpoint_url(endpoint),
                )

            items.extend(page_items)
            page += 1
            if len(page_items) < PAGE_SIZE:
                break

        self.logger.debug(f"Fetched {len(items)} items from {endpoint} in {page} pages")
        return items


async def fetch_access_token(
    session: aiohttp.ClientSession, domain: str, username: str, password: str
) -> dict[str, Any]:
    """Exchange API client credentials for a bearer token.

    Returns the token response (``access_token``, ``expires_in``, ...).
    Storing and refreshing the token is left to the operator.
    """
    url_builder = AcceloUrlBuilder(domain)
    credentials = base64.b64encode(f"{username}:{password}".encode()).decode()
    headers = {
        "Authorization": f"Basic {credentials}",
        "Content-Type": "application/x-www-form-urlencoded",
    }
    url = url_builder.get_token_url()

    async with session.post(
        url, headers=headers, data={"grant_type": "client_credentials"}
    ) as response:
        text = await response.text()

    return HttpResponse(status=response.status, text=text, url=url).json(AcceloApiError)
