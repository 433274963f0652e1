from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any, Optional

import httpx
import typer
import uvicorn

from phone_sms_api.config import Settings
from phone_sms_api.exceptions.custom import NavigationError
from phone_sms_api.main import configure_logging
from phone_sms_api.mappers.results import phone_from_id
from phone_sms_api.services.api_client import DEFAULT_API_BASE, SmsApiClient
from phone_sms_api.services.provider import build_services

app = typer.Typer(no_args_is_help=True, help="Fake phone numbers and their inbound SMS.")
scrape_app = typer.Typer(no_args_is_help=True, help="Run the scrapers in-process, without the API.")
app.add_typer(scrape_app, name="scrape")

_TIMEOUT = 120.0  # listing scans take a while upstream


def _print(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _call(ctx: typer.Context, fn: Callable[[SmsApiClient], Awaitable[Any]]) -> Any:
    api_base = ctx.obj["api"]

    async def runner() -> Any:
        async with httpx.AsyncClient(timeout=_TIMEOUT) as http:
            return await fn(SmsApiClient(http, api_base))

    try:
        return asyncio.run(runner())
    except httpx.HTTPError as exc:
        typer.secho(f"Failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _choose(label: str, options: list[str]) -> int:
    """Prompt for a 1-based choice; returns the 0-based index."""
    for i, option in enumerate(options, start=1):
        typer.echo(f"  {i}. {option}")
    while True:
        choice = typer.prompt(label, type=int)
        if 1 <= choice <= len(options):
            return choice - 1
        typer.echo(f"Pick a number between 1 and {len(options)}.")


@app.callback()
def main(
    ctx: typer.Context,
    api: str = typer.Option(DEFAULT_API_BASE, "--api", envvar="SMS_API", help="API base URL."),
) -> None:
    ctx.obj = {"api": api.rstrip("/")}


@app.command()
def health(ctx: typer.Context) -> None:
    """Check API health."""
    _print(_call(ctx, lambda c: c.health()))


@app.command()
def status(ctx: typer.Context) -> None:
    """Check API status."""
    _print(_call(ctx, lambda c: c.status()))


@app.command()
def countries(ctx: typer.Context) -> None:
    """List all available countries."""
    _print(_call(ctx, lambda c: c.countries()))


@app.command()
def numbers(
    ctx: typer.Context,
    country: Optional[str] = typer.Option(None, "--country", help="Filter by country code or name."),
) -> None:
    """List available numbers."""
    _print(_call(ctx, lambda c: c.numbers(country)))


@app.command()
def messages(
    ctx: typer.Context,
    number_id: str = typer.Option(..., "--id", help="Phone number ID."),
) -> None:
    """Show messages received by a number."""
    _print(_call(ctx, lambda c: c.messages(number_id)))


@app.command()
def otp(
    ctx: typer.Context,
    number_id: str = typer.Option(..., "--id", help="Phone number ID."),
) -> None:
    """Show the latest OTP received by a number."""
    _print(_call(ctx, lambda c: c.otp(number_id)))


@app.command()
def interactive(ctx: typer.Context) -> None:
    """Pick a country and a number, then read its messages or latest OTP."""
    if not typer.confirm("You want fake phone numbers? Continue?", default=True):
        typer.echo("Goodbye!")
        return

    typer.echo("Fetching countries...")
    available = _call(ctx, lambda c: c.countries())
    if not available:
        typer.echo("No countries available right now.")
        return
    picked = available[_choose(
        "Decide in what country you want a phone number from",
        [f"{c['country']} ({c['count']})" for c in available],
    )]

    code = picked["code"]
    typer.echo(f"Fetching numbers for {code}...")
    found = _call(ctx, lambda c: c.numbers(code))
    if not found:
        typer.echo("No numbers found for this country.")
        return
    number = found[_choose("Select phone number", [n["phone"] for n in found])]
    number_id = number["id"]
    typer.echo(f"You selected: {number['phone']}")

    action = _choose("What do you want to do?", ["View messages", "Get latest OTP", "Exit"])
    if action == 0:
        typer.echo(f"Fetching messages for {number_id}...")
        for m in _call(ctx, lambda c: c.messages(number_id)):
            typer.echo(f"[{m['time']}] {m['from']}: {m['text']}")
    elif action == 1:
        result = _call(ctx, lambda c: c.otp(number_id))
        typer.echo(f"OTP for {result['phone']}: {result.get('otp') or 'Not found'}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default from settings)."),
    port: Optional[int] = typer.Option(None, help="Port (default from settings)."),
) -> None:
    """Run the HTTP API."""
    settings = Settings()
    uvicorn.run(
        "phone_sms_api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


@scrape_app.command("numbers")
def scrape_numbers(
    limit: int = typer.Option(10, help="How many numbers to print."),
) -> None:
    """Scan the listing pages and print a preview."""
    settings = Settings()
    configure_logging(settings.log_level)
    listing, _ = build_services(settings)

    found = asyncio.run(listing.list_numbers())
    typer.echo(f"Found {len(found)} numbers")
    _print([n.model_dump() for n in found[:limit]])


@scrape_app.command("messages")
def scrape_messages(
    phone: Optional[str] = typer.Option(None, "--phone", help="Number to read; defaults to the first listed."),
    limit: int = typer.Option(10, help="How many messages to print."),
) -> None:
    """Read one inbox and print a preview."""
    settings = Settings()
    configure_logging(settings.log_level)
    listing, inbox = build_services(settings)

    async def run() -> tuple[str, list]:
        target = phone
        if not target:
            found = await listing.list_numbers()
            if not found:
                raise typer.BadParameter("No numbers found upstream; pass --phone.")
            target = found[0].phone
            typer.echo(f"No --phone provided. Using: {target}")
        target = phone_from_id(target)
        return target, await inbox.list_messages(target)

    try:
        target, msgs = asyncio.run(run())
    except (NavigationError, ValueError) as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Messages for {target}: {len(msgs)}")
    _print([m.model_dump(by_alias=True) for m in msgs[:limit]])


if __name__ == "__main__":
    app()
