"""CLI interface using typer."""

import asyncio
import json
import logging
import sys

import typer

from .config import settings
from .core import HttpDispatcher, Method, Result
from .request import TextRequest

app = typer.Typer(
    name="textrequest",
    help="Send text requests and inspect their decoded responses",
    no_args_is_help=True,
)


def _parse_headers(values: list[str] | None) -> dict[str, str]:
    """Parse repeated "Name: value" options into a dict."""
    headers = {}
    for value in values or []:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Invalid header {value!r}, expected 'Name: value'")
        headers[name.strip()] = content.strip()
    return headers


async def _fetch(request: TextRequest) -> Result:
    async with HttpDispatcher(timeout=settings.timeout, user_agent=settings.user_agent) as dispatcher:
        return await dispatcher.dispatch(request)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def fetch(
    url: str = typer.Argument(..., help="URL to request"),
    method: Method = typer.Option(Method.GET, "-X", "--method", case_sensitive=False, help="HTTP method"),
    header: list[str] = typer.Option(None, "-H", "--header", help="Header as 'Name: value'"),
    data: str = typer.Option(None, "-d", "--data", help="JSON request body"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only output content"),
):
    """Send a single request and print the decoded response."""
    headers = _parse_headers(header)
    body = None
    if data is not None:
        try:
            body = json.loads(data)
        except json.JSONDecodeError as e:
            raise typer.BadParameter(f"--data is not valid JSON: {e}")

    request = TextRequest(
        method,
        url,
        on_success=lambda text: None,
        headers=headers,
        body=body,
    )
    result = asyncio.run(_fetch(request))

    if not result.is_success:
        typer.echo(f"Error: {result.error}", err=True)
        raise typer.Exit(1)

    content = result.value
    if quiet:
        sys.stdout.write(content)
        return

    typer.echo(f"URL: {url}")
    typer.echo(f"Cache-Key: {request.get_cache_key()}")
    if result.cache_entry is not None:
        typer.echo(f"ETag: {result.cache_entry.etag}")
    typer.echo("---")
    typer.echo(content[:2000])
    if len(content) > 2000:
        typer.echo(f"\n... (truncated, {len(content)} chars total)")


@app.command("cache-key")
def cache_key(
    url: str = typer.Argument(..., help="Request URL"),
    header: list[str] = typer.Option(None, "-H", "--header", help="Header as 'Name: value'"),
):
    """Print the cache key a request would be stored under."""
    request = TextRequest("GET", url, on_success=lambda text: None, headers=_parse_headers(header))
    typer.echo(request.get_cache_key())


@app.command()
def version():
    """Show version."""
    from . import __version__

    typer.echo(f"textrequest {__version__}")


if __name__ == "__main__":
    app()
