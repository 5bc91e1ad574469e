"""
Webhook context management using contextvars for automatic propagation.

The webhook route sets the originating app and event type once per inbound
call; every logger created afterwards in the same request picks them up.
"""

from contextvars import ContextVar

_app_context: ContextVar[str | None] = ContextVar(
    "webhook_app", default=None
)  # From the `app` query parameter
_event_context: ContextVar[str | None] = ContextVar(
    "webhook_event", default=None
)  # From the `type` query parameter


def set_webhook_context(app: str | None = None, event: str | None = None) -> None:
    """
    Set the webhook context for the current async context.

    Args:
        app: Originating platform tag ("accelo" or "slack")
        event: Event type tag ("request_created", "interaction", ...)
    """
    if app is not None:
        _app_context.set(app)
    if event is not None:
        _event_context.set(event)


def get_current_app_context() -> str | None:
    """Get the current webhook app tag, or None if not set."""
    return _app_context.get()


def get_current_event_context() -> str | None:
    """Get the current webhook event type, or None if not set."""
    return _event_context.get()
