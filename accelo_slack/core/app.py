"""
FastAPI application factory.

The lifespan owns every long-lived resource: logging, the shared aiohttp
session, the message store and user directory, and the dispatcher built on
top of them. Components get their collaborators through constructors; only
the routes read ``app.state``.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import aiohttp
from fastapi import FastAPI

from accelo_slack.accelo import AcceloAPI, AcceloClient, AcceloLinks
from accelo_slack.api.middleware import ErrorHandlerMiddleware, RequestLoggingMiddleware
from accelo_slack.api.routes import health_router, webhook_router
from accelo_slack.core.config.settings import Settings
from accelo_slack.core.logging.logger import get_app_logger, setup_app_logging
from accelo_slack.domain.builders import RequestMessageBuilder
from accelo_slack.domain.services import LinkUnfurlResolver, RequestService
from accelo_slack.persistence import Stores, close_stores, create_stores
from accelo_slack.slack.client import SlackClient
from accelo_slack.webhooks import WebhookDispatcher


def create_http_session() -> aiohttp.ClientSession:
    """Persistent HTTP session with connection pooling."""
    connector = aiohttp.TCPConnector(
        limit=100,
        keepalive_timeout=30,
        enable_cleanup_closed=True,
    )
    return aiohttp.ClientSession(connector=connector, timeout=aiohttp.ClientTimeout(total=30))


@dataclass
class ApiClients:
    accelo: AcceloAPI
    slack: SlackClient


def create_api_clients(settings: Settings, session: aiohttp.ClientSession) -> ApiClients:
    accelo_client = AcceloClient(
        session, domain=settings.accelo_domain, access_token=settings.accelo_access_token
    )
    slack = SlackClient(session, bot_token=settings.slack_bot_token)
    return ApiClients(accelo=AcceloAPI(accelo_client), slack=slack)


def build_dispatcher(
    settings: Settings, session: aiohttp.ClientSession, stores: Stores
) -> WebhookDispatcher:
    """Wire the API clients, services and dispatcher for one process."""
    clients = create_api_clients(settings, session)

    builder = RequestMessageBuilder(clients.accelo, stores.users, settings)
    requests = RequestService(
        clients.accelo, clients.slack, builder, stores.messages, stores.users
    )
    unfurls = LinkUnfurlResolver(
        clients.accelo, clients.slack, stores.users, AcceloLinks(settings.accelo_web_url)
    )
    return WebhookDispatcher(settings, requests, unfurls)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    setup_app_logging(settings)
    logger = get_app_logger()

    logger.info(f"🚀 Starting accelo-slack v{settings.version}")
    logger.info(f"📊 Environment: {settings.environment}")
    logger.info(f"📝 Log level: {settings.log_level}")
    logger.info(f"💾 Store type: {settings.store_type}")

    owns_dispatcher = getattr(app.state, "dispatcher", None) is None
    session: aiohttp.ClientSession | None = None
    stores: Stores | None = None

    if owns_dispatcher:
        settings.validate_required()

        session = create_http_session()
        app.state.http_session = session
        logger.info("🌐 Persistent HTTP session created - connections: 100, keepalive: 30s")

        stores = create_stores(settings)
        app.state.stores = stores
        app.state.dispatcher = build_dispatcher(settings, session, stores)

        if not settings.channel_map:
            logger.warning("⚠️ CHANNEL_MAP is empty; request messages will have no channel")

    logger.info(f"📍 Webhook URL: http://localhost:{settings.port}/webhook?token=***&app=...&type=...")
    logger.info("✅ Startup completed")

    try:
        yield
    finally:
        logger.info("🛑 Shutting down...")
        if stores is not None:
            await close_stores(stores)
        if session is not None:
            await session.close()
            logger.info("🌐 Persistent HTTP session closed cleanly")
        logger.info("✅ Shutdown completed")


def create_app(
    settings: Settings | None = None,
    dispatcher: WebhookDispatcher | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Configuration; read from the environment when omitted
        dispatcher: Prebuilt dispatcher; when given, the lifespan opens no
            session or store of its own

    Returns:
        Configured FastAPI application
    """
    settings = settings or Settings()

    app = FastAPI(
        title="accelo-slack",
        description="Relays Accelo request events to Slack and Slack actions back to Accelo",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )
    app.state.settings = settings
    app.state.dispatcher = dispatcher

    # Last added runs first: errors are caught outside request logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    app.include_router(health_router)
    app.include_router(webhook_router)

    return app
