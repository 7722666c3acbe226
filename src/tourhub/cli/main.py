"""TourHub CLI — run the server and handle admin chores over the HTTP API.

Usage:
    tourhub serve --port 5000                    # Run the API with uvicorn
    tourhub token admin@example.com              # Mint a bearer token
    tourhub requests                             # Pending tour-guide requests
    tourhub decide 665f1c... approved            # Approve/reject a request
    tourhub packages --type adventure            # List packages

Admin commands read the bearer token from --token or TOURHUB_TOKEN.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import os
import sys
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:5000"


def _api_url() -> str:
    return os.environ.get("TOURHUB_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the TourHub backend."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

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


def _require_token(token: Optional[str]) -> str:
    tok = token or os.environ.get("TOURHUB_TOKEN")
    if not tok:
        click.secho(
            "Error: --token required (or set TOURHUB_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return tok


def _check(r: httpx.Response) -> None:
    """Print the API's error envelope and exit on a non-2xx response."""
    if r.is_success:
        return
    try:
        message = r.json().get("message", r.text)
    except ValueError:
        message = r.text
    click.secho(f"Error {r.status_code}: {message}", fg="red", err=True)
    sys.exit(1)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k) or "—")[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="tourhub")
def main():
    """TourHub — tourism booking platform backend."""


# ---------------------------------------------------------------------------
# tourhub serve
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default from TOURHUB_HOST)")
@click.option("--port", "-p", type=int, default=None, help="Port (default from TOURHUB_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from tourhub.config import settings

    uvicorn.run(
        "tourhub.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# tourhub token
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.option("--name", help="Display name to carry in the token")
def token(email: str, name: Optional[str]):
    """Mint a one-hour bearer token for EMAIL."""
    _run(_token_impl(email, name))


async def _token_impl(email: str, name: Optional[str]):
    body = {"email": email}
    if name:
        body["name"] = name
    async with _client() as c:
        r = await c.post("/api/jwt", json=body)
        _check(r)
        click.echo(r.json()["token"])


# ---------------------------------------------------------------------------
# tourhub requests
# ---------------------------------------------------------------------------


@main.command()
@click.option("--token", "-k", "auth_token", help="Admin bearer token")
def requests(auth_token: Optional[str]):
    """List users waiting on a role request decision."""
    _run(_requests_impl(_require_token(auth_token)))


async def _requests_impl(auth_token: str):
    async with _client(auth_token) as c:
        r = await c.get("/api/users/requests")
        _check(r)
        users = r.json()

    if not users:
        click.echo("No pending role requests.")
        return

    _print_table(users, [
        ("ID", "id", 24),
        ("EMAIL", "email", 30),
        ("NAME", "name", 20),
        ("ROLE", "role", 10),
        ("REQUESTED", "requestRole", 10),
    ])
    click.echo(f"\nDecide with: tourhub decide <id> approved|rejected")


# ---------------------------------------------------------------------------
# tourhub decide
# ---------------------------------------------------------------------------


@main.command()
@click.argument("user_id")
@click.argument("decision", type=click.Choice(["approved", "rejected"]))
@click.option("--token", "-k", "auth_token", help="Admin bearer token")
def decide(user_id: str, decision: str, auth_token: Optional[str]):
    """Approve or reject USER_ID's pending role request."""
    _run(_decide_impl(user_id, decision, _require_token(auth_token)))


async def _decide_impl(user_id: str, decision: str, auth_token: str):
    async with _client(auth_token) as c:
        r = await c.patch(f"/api/users/{user_id}/request", json={"decision": decision})
        _check(r)
        user = r.json()

    color = "green" if decision == "approved" else "yellow"
    click.secho(f"Request {decision}: {user['email']} is now {user['role']}", fg=color)


# ---------------------------------------------------------------------------
# tourhub packages
# ---------------------------------------------------------------------------


@main.command()
@click.option("--type", "-t", "package_type", help="Only packages of this type")
def packages(package_type: Optional[str]):
    """List tour packages."""
    _run(_packages_impl(package_type))


async def _packages_impl(package_type: Optional[str]):
    path = f"/api/packages/type/{package_type}" if package_type else "/api/packages"
    async with _client() as c:
        r = await c.get(path)
        _check(r)
        rows = r.json()

    if not rows:
        click.echo("No packages.")
        return

    _print_table(rows, [
        ("ID", "id", 24),
        ("NAME", "packageName", 30),
        ("TYPE", "type", 12),
        ("PRICE", "price", 10),
        ("GUIDE", "guide", 25),
    ])


if __name__ == "__main__":
    main()
