"""
Webhook route.

One endpoint receives both Accelo and Slack webhooks. The route only deals
with HTTP: it turns the call into a WebhookEnvelope, hands it to the
dispatcher on ``app.state`` and writes the dispatcher's answer back.
"""

from typing import Any

from fastapi import APIRouter, Query, Request
from fastapi.responses import Response

from accelo_slack.core.logging.context import set_webhook_context
from accelo_slack.core.logging.logger import get_logger
from accelo_slack.webhooks import WebhookDispatcher, WebhookEnvelope

router = APIRouter(tags=["Webhooks"])


async def _read_body(request: Request) -> dict[str, Any]:
    """JSON object for JSON calls, form fields otherwise."""
    content_type = request.headers.get("content-type", "")

    if "application/json" in content_type:
        try:
            body = await request.json()
        except ValueError as e:
            get_logger(__name__).warning(f"Webhook body is not valid JSON: {e}")
            return {}
        return body if isinstance(body, dict) else {}

    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


@router.post("/webhook")
async def receive_webhook(
    request: Request,
    token: str | None = Query(None, description="Shared webhook secret"),
    app: str | None = Query(None, description="Source app: accelo or slack"),
    type: str | None = Query(None, description="Event type tag"),
) -> Response:
    """
    Receive an Accelo or Slack webhook.

    Always answers 200 with an empty JSON body, except the Slack URL
    verification handshake which gets the challenge back as plain text.
    """
    set_webhook_context(app=app, event=type)

    envelope = WebhookEnvelope(
        auth_token=token,
        app=app,
        event_type=type,
        body=await _read_body(request),
        query_params={k: v for k, v in request.query_params.items() if k != "token"},
    )

    dispatcher: WebhookDispatcher = request.app.state.dispatcher
    result = await dispatcher.dispatch(envelope)
    return Response(content=result.content, media_type=result.media_type)
