"""
accelo-slack CLI.

Server commands plus one-shot maintenance tasks (token exchange, user
matching, channel map check).
"""

import asyncio
import json
import subprocess
import sys
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import typer

from accelo_slack.accelo import fetch_access_token
from accelo_slack.core.app import create_api_clients, create_http_session
from accelo_slack.core.config.settings import Settings
from accelo_slack.core.logging.logger import setup_app_logging
from accelo_slack.domain.services import sync_users
from accelo_slack.persistence import close_stores, create_stores

app = typer.Typer(help="Accelo ↔ Slack relay CLI")

APP_FACTORY = "accelo_slack.core.app:create_app"

T = TypeVar("T")


def _load_settings(require_credentials: bool = True) -> Settings:
    try:
        settings = Settings()
        if require_credentials:
            settings.validate_required()
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}", err=True)
        raise typer.Exit(1) from e
    return settings


def _run_uvicorn(extra_args: list[str], host: str, port: int, label: str) -> None:
    cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        APP_FACTORY,
        "--factory",
        "--host",
        host,
        "--port",
        str(port),
        *extra_args,
    ]

    typer.echo(f"🚀 Starting accelo-slack {label} server...")
    typer.echo(f"🌐 Server: http://{host}:{port}")
    typer.echo(f"📍 Webhook: http://{host}:{port}/webhook")
    typer.echo("💡 Press CTRL+C to stop")
    typer.echo()

    try:
        subprocess.run(cmd, check=True)
    except subprocess.CalledProcessError as e:
        typer.echo(f"❌ Server failed to start (exit code: {e.returncode})", err=True)
        typer.echo("", err=True)
        typer.echo("Common issues:", err=True)
        typer.echo("• A required variable is missing from .env", err=True)
        typer.echo(f"• Port {port} already in use (try --port with different number)", err=True)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        typer.echo("👋 Server stopped")


def _with_clients(
    settings: Settings, work: Callable[[Any, Any], Awaitable[T]]
) -> T:
    """Run ``work(clients, stores)`` with a session and stores opened for it."""

    async def runner() -> T:
        stores = create_stores(settings)
        try:
            async with create_http_session() as session:
                return await work(create_api_clients(settings, session), stores)
        finally:
            await close_stores(stores)

    return asyncio.run(runner())


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(None, "--port", "-p", help="Port to bind to (default: PORT)"),
    workers: int = typer.Option(1, "--workers", "-w", help="Number of worker processes"),
):
    """Run the webhook server (no auto-reload)."""
    port = port or _load_settings(require_credentials=False).port
    _run_uvicorn(["--workers", str(workers)], host, port, "production")


@app.command()
def dev(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(None, "--port", "-p", help="Port to bind to (default: PORT)"),
):
    """Run the webhook server with auto-reload."""
    port = port or _load_settings(require_credentials=False).port
    _run_uvicorn(["--reload"], host, port, "development")


@app.command()
def token():
    """Exchange ACCELO_USERNAME/ACCELO_PASSWORD for a bearer token and print it."""
    settings = _load_settings(require_credentials=False)
    missing = [
        name
        for name, value in (
            ("ACCELO_DOMAIN", settings.accelo_domain),
            ("ACCELO_USERNAME", settings.accelo_username),
            ("ACCELO_PASSWORD", settings.accelo_password),
        )
        if not value
    ]
    if missing:
        typer.echo(f"❌ Missing {', '.join(missing)}", err=True)
        raise typer.Exit(1)

    async def exchange() -> dict[str, Any]:
        async with create_http_session() as session:
            return await fetch_access_token(
                session, settings.accelo_domain, settings.accelo_username, settings.accelo_password
            )

    result = asyncio.run(exchange())
    if "access_token" not in result:
        typer.echo(f"❌ Token exchange failed: {json.dumps(result)}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✅ Token expires in {result.get('expires_in', '?')}s")
    typer.echo("Set it as ACCELO_ACCESS_TOKEN:")
    typer.echo(result["access_token"])


@app.command("sync-users")
def sync_users_command():
    """Match Accelo staff to Slack users by email and store the result."""
    settings = _load_settings()
    setup_app_logging(settings)

    async def work(clients, stores) -> int:
        users = await sync_users(clients.accelo, clients.slack, stores.users)
        return len(users)

    count = _with_clients(settings, work)
    typer.echo(f"✅ Stored {count} matched users ({settings.store_type} store)")


@app.command("check-channels")
def check_channels():
    """List Accelo request types that have no channel in CHANNEL_MAP."""
    settings = _load_settings()

    async def work(clients, stores) -> list[str]:
        types = await clients.accelo.request_types.list("title")
        return [t.title for t in types if t.title]

    titles = _with_clients(settings, work)
    unmapped = settings.unmapped_request_types(titles)

    if not unmapped:
        typer.echo(f"✅ All {len(titles)} request types have a channel")
        return

    typer.echo(f"⚠️ {len(unmapped)} request types have no channel in CHANNEL_MAP:")
    for title in unmapped:
        typer.echo(f"  • {title}")
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
