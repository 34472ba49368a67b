"""RecordVault CLI — log in and manage your records from a terminal.

Usage:
    recordvault signup                      # Create an account (prompts)
    recordvault login                       # Log in (prompts)
    recordvault list [--reveal]             # Show your records
    recordvault add --type Account --name Email --id-number me@example.com
    recordvault delete <record-id>          # Delete a record
    recordvault logout                      # Forget the stored token
    recordvault status                      # Who am I logged in as?
    recordvault serve                       # Run the API server
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import os
from pathlib import Path

import click
import httpx

from recordvault.client.render import render_record, render_records
from recordvault.client.session import (
    ApiError,
    SessionExpiredError,
    SessionManager,
    SessionState,
)
from recordvault.client.token_store import FileTokenStore

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_SESSION_FILE = "~/.recordvault/session.json"
RECORD_TYPES = ["Account", "Certificate", "Scholarship", "Other"]


def _api_url() -> str:
    return os.environ.get("RECORDVAULT_API_URL", DEFAULT_API_URL).rstrip("/")


def _client() -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the RecordVault backend."""
    return httpx.AsyncClient(base_url=_api_url(), timeout=30.0)


def _store() -> FileTokenStore:
    return FileTokenStore(
        Path(os.environ.get("RECORDVAULT_SESSION_FILE", DEFAULT_SESSION_FILE))
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


async def _with_session(action):
    """Open a client + session, run action(session), map failures to exit codes."""
    try:
        async with _client() as http:
            session = SessionManager(http, _store())
            return await action(session)
    except SessionExpiredError:
        raise click.ClickException("Not logged in or session expired. Run `recordvault login`.")
    except ApiError as e:
        raise click.ClickException(e.message)
    except httpx.HTTPError as e:
        raise click.ClickException(f"Could not reach server at {_api_url()} ({e.__class__.__name__}).")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@click.group()
def cli():
    """RecordVault: your personal records, behind your own login."""


@cli.command()
@click.option("--username", prompt=True)
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
def signup(username: str, password: str):
    """Create an account and log in."""

    async def action(session: SessionManager):
        await session.signup(username, password)
        click.secho(f"Signed up and logged in as {session.username}.", fg="green")

    _run(_with_session(action))


@cli.command()
@click.option("--username", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
def login(username: str, password: str):
    """Log in with username and password."""

    async def action(session: SessionManager):
        records = await session.login(username, password)
        click.secho(f"Logged in as {session.username}.", fg="green")
        click.echo(f"{len(records)} record(s).")

    _run(_with_session(action))


@cli.command()
def logout():
    """Forget the stored token."""
    _store().clear()
    click.echo("Logged out.")


@cli.command()
def status():
    """Show whether a session is stored."""
    stored = _store().load()
    if stored is None:
        click.echo(SessionState.UNAUTHENTICATED.value)
    else:
        click.echo(f"{SessionState.AUTHENTICATED.value} as {stored.username}")


@cli.command("list")
@click.option("--reveal", is_flag=True, help="Show secrets instead of masking them.")
def list_records(reveal: bool):
    """List your records, newest first."""

    async def action(session: SessionManager):
        records = await session.fetch_records()
        click.echo(render_records(records, reveal=reveal))

    _run(_with_session(action))


@cli.command()
@click.option("--type", "record_type", type=click.Choice(RECORD_TYPES), required=True)
@click.option("--name", required=True)
@click.option("--id-number", required=True)
@click.option(
    "--password",
    "secret",
    prompt="Password/Key (optional)",
    hide_input=True,
    default="",
    show_default=False,
)
@click.option("--notes", default=None)
def add(record_type: str, name: str, id_number: str, secret: str, notes: str | None):
    """Add a record."""

    async def action(session: SessionManager):
        created = await session.create_record(
            type=record_type,
            name=name,
            id_number=id_number,
            password=secret,
            notes=notes,
        )
        click.secho("Record saved.", fg="green")
        click.echo(render_record(created))

    _run(_with_session(action))


@cli.command()
@click.argument("record_id")
@click.option("--yes", is_flag=True, help="Don't ask for confirmation.")
def delete(record_id: str, yes: bool):
    """Delete a record by id."""
    if not yes:
        click.confirm(
            "Are you sure you want to delete this record? This action is permanent.",
            abort=True,
        )

    async def action(session: SessionManager):
        await session.delete_record(record_id)
        click.secho("Record deleted.", fg="green")

    _run(_with_session(action))


@cli.command()
@click.option("--host", default=None, help="Bind address (default from settings).")
@click.option("--port", default=None, type=int, help="Port (default from settings).")
def serve(host: str | None, port: int | None):
    """Run the API server with uvicorn."""
    import uvicorn

    from recordvault.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "recordvault.main:app",
        host=host or settings.host,
        port=port or settings.port,
    )


if __name__ == "__main__":
    cli()
