"""
Slack Web API client.

Key Design Decisions:
- Pure dependency injection (the aiohttp session is owned by the app lifespan)
- One private primitive, ``_call``, shared by every Web API method
- ``ok: false`` answers are logged and returned, not raised
"""

import json
from typing import Any

import aiohttp

from accelo_slack.core.errors import SlackApiError
from accelo_slack.core.http import HttpResponse
from accelo_slack.core.logging.logger import get_logger

SLACK_API_URL = "https://slack.com/api"


class SlackClient:
    """Slack Web API client for the methods the relay uses."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        bot_token: str,
        logger: Any | None = None,
        base_url: str = SLACK_API_URL,
    ):
        """Initialize Slack client with dependency injection.

        Args:
            session: Persistent aiohttp session (managed by FastAPI lifespan)
            bot_token: Bot token of the Slack app
            logger: Pre-configured logger instance
            base_url: Slack Web API base URL
        """
        self.session = session
        self.bot_token = bot_token
        self.base_url = base_url.rstrip("/")
        self.logger = logger or get_logger(__name__)

    def _get_headers(self, authenticated: bool = True, json_body: bool = True) -> dict[str, str]:
        headers: dict[str, str] = {}
        if authenticated:
            headers["Authorization"] = f"Bearer {self.bot_token}"
        if json_body:
            headers["Content-Type"] = "application/json; charset=utf-8"
        return headers

    async def _post(
        self,
        url: str,
        body: dict[str, Any],
        form: bool = False,
        authenticated: bool = True,
    ) -> HttpResponse:
        headers = self._get_headers(authenticated=authenticated, json_body=not form)
        kwargs: dict[str, Any] = {"data": body} if form else {"json": body}

        async with self.session.post(url, headers=headers, **kwargs) as response:
            text = await response.text()
            return HttpResponse(status=response.status, text=text, url=url)

    async def _call(
        self,
        method: str,
        body: dict[str, Any],
        form: bool = False,
        authenticated: bool = True,
    ) -> dict[str, Any]:
        """Call one Web API method and return the parsed answer.

        Args:
            method: Web API method name, e.g. ``chat.postMessage``
            body: Request arguments
            form: Send as ``application/x-www-form-urlencoded`` instead of JSON
            authenticated: Send the bot token

        Raises:
            SlackApiError: If the answer is not a JSON object
        """
        url = f"{self.base_url}/{method}"
        self.logger.debug(f"Calling {method} with {body}")

        response = await self._post(url, body, form=form, authenticated=authenticated)
        data = response.json(SlackApiError)
        if not isinstance(data, dict):
            raise SlackApiError(
                "Unexpected response envelope", status=response.status, url=url
            )
        if not data.get("ok", False):
            self.logger.warning(f"Slack {method} failed: {data.get('error', 'unknown_error')}")
        return data

    # ------------------------------------------------------------------ chat

    async def post_message(self, body: dict[str, Any]) -> dict[str, Any]:
        """chat.postMessage: body needs ``channel`` and text, blocks or attachments."""
        return await self._call("chat.postMessage", body)

    async def update_message(self, body: dict[str, Any]) -> dict[str, Any]:
        """chat.update: body needs ``channel`` and ``ts`` of the message."""
        return await self._call("chat.update", body)

    async def delete_message(self, channel: str, ts: str) -> dict[str, Any]:
        return await self._call("chat.delete", {"channel": channel, "ts": ts})

    async def unfurl(
        self, channel: str, ts: str, unfurls: dict[str, dict[str, Any]]
    ) -> dict[str, Any]:
        """chat.unfurl: ``unfurls`` maps each shared URL to its preview."""
        body = {"channel": channel, "ts": ts, "unfurls": json.dumps(unfurls)}
        return await self._call("chat.unfurl", body, form=True)

    # --------------------------------------------------------- conversations

    async def conversations_replies(
        self, channel: str, ts: str, **options: Any
    ) -> dict[str, Any]:
        body = {"channel": channel, "ts": ts, **options}
        return await self._call("conversations.replies", body, form=True)

    async def conversations_join(self, channel: str) -> dict[str, Any]:
        return await self._call("conversations.join", {"channel": channel})

    # ----------------------------------------------------------------- views

    async def views_publish(self, user_id: str, view: dict[str, Any], **options: Any) -> dict[str, Any]:
        return await self._call("views.publish", {"user_id": user_id, "view": view, **options})

    async def views_open(self, trigger_id: str, view: dict[str, Any]) -> dict[str, Any]:
        return await self._call("views.open", {"trigger_id": trigger_id, "view": view})

    async def views_update(self, view: dict[str, Any], **options: Any) -> dict[str, Any]:
        """views.update: pass ``view_id`` or ``external_id`` in options."""
        return await self._call("views.update", {"view": view, **options})

    async def views_push(self, trigger_id: str, view: dict[str, Any]) -> dict[str, Any]:
        return await self._call("views.push", {"trigger_id": trigger_id, "view": view})

    # ----------------------------------------------------------------- users

    async def users_lookup_by_email(self, email: str) -> dict[str, Any]:
        return await self._call("users.lookupByEmail", {"email": email}, form=True)

    async def users_list(self, **options: Any) -> dict[str, Any]:
        return await self._call("users.list", dict(options), form=True)

    # ----------------------------------------------------------------- oauth

    async def oauth_v2_access(
        self,
        client_id: str,
        client_secret: str,
        code: str,
        redirect_uri: str | None = None,
    ) -> dict[str, Any]:
        """Exchange a temporary OAuth code for an access token."""
        body = {"client_id": client_id, "client_secret": client_secret, "code": code}
        if redirect_uri:
            body["redirect_uri"] = redirect_uri
        return await self._call("oauth.v2.access", body, form=True, authenticated=False)

    # -------------------------------------------------------- response urls

    async def respond(self, response_url: str, body: dict[str, Any]) -> str:
        """Post to an interaction ``response_url``; returns the raw answer text."""
        response = await self._post(response_url, body, authenticated=False)
        return response.text
