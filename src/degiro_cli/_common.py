"""Shared CLI context, rendering, and client helpers."""

from __future__ import annotations

import asyncio
from difflib import get_close_matches
import json
import logging
import sys
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, NoReturn

import click
import httpx
import typer
from pydantic import ValidationError
from typer.core import TyperGroup
from rich.console import Console
from rich.table import Table

from degiro_client import DegiroClient
from degiro_client.config import ClientConfig
from degiro_client.exceptions import DegiroError, ErrorCode

HELP_CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 110,
}
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class CLIState:
    config: ClientConfig
    json_output: bool


class SuggestionGroup(TyperGroup):
    """Appends close matches to the usage error for an unknown command."""

    def resolve_command(
        self,
        ctx: click.Context,
        args: list[str],
    ) -> tuple[str | None, click.Command | None, list[str]]:
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as exc:
            matches = get_close_matches(args[0], self.list_commands(ctx), n=3, cutoff=0.45) if args else []
            if matches:
                exc.message = f"{exc.message}\n\nDid you mean: {', '.join(matches)}"
            raise


def build_typer(help_text: str) -> typer.Typer:
    return typer.Typer(
        help=help_text,
        cls=SuggestionGroup,
        no_args_is_help=True,
        rich_markup_mode="markdown",
        context_settings=HELP_CONTEXT_SETTINGS,
    )


def configure_logging(cfg: ClientConfig) -> None:
    level = logging.DEBUG if cfg.debug else getattr(logging, cfg.log_level, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def resolve_json_mode(json_flag: bool) -> bool:
    return json_flag or not sys.stdout.isatty()


def get_state(ctx: typer.Context) -> CLIState:
    if not isinstance(ctx.obj, CLIState):
        raise RuntimeError("CLI context not initialized")
    return ctx.obj


def run_async(awaitable: Any) -> Any:
    return asyncio.run(awaitable)


async def with_client(
    state: CLIState,
    action: Callable[[DegiroClient], Awaitable[Any]],
    *,
    authenticate: bool = True,
) -> Any:
    """Open a client, log in unless a session was configured, and run `action`."""
    async with DegiroClient(state.config) as client:
        if authenticate and not client.session.is_authenticated:
            await client.login()
        return await action(client)


def run_command(
    state: CLIState,
    action: Callable[[DegiroClient], Awaitable[Any]],
    *,
    authenticate: bool = True,
) -> Any:
    """Run `action` on a fresh client; client, transport and decode errors exit through `handle_error`."""
    try:
        return run_async(with_client(state, action, authenticate=authenticate))
    except (DegiroError, httpx.HTTPError, json.JSONDecodeError) as exc:
        handle_error(as_degiro_error(exc), json_output=state.json_output)


def as_degiro_error(exc: DegiroError | ValidationError | httpx.HTTPError | json.JSONDecodeError) -> DegiroError:
    """Classify errors the client lets propagate so the CLI can render them."""
    if isinstance(exc, DegiroError):
        return exc
    if isinstance(exc, ValidationError):
        return DegiroError(
            "invalid configuration",
            code=ErrorCode.INVALID_ARGS,
            details={"errors": [f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in exc.errors()]},
            suggestion="Check DEGIRO_* environment variables and config.json.",
        )
    if isinstance(exc, httpx.HTTPError):
        return DegiroError(
            f"request failed: {exc}",
            code=ErrorCode.TRANSPORT_ERROR,
            details={"error": type(exc).__name__},
        )
    return DegiroError(
        "server answered with a non-JSON body",
        code=ErrorCode.MALFORMED_RESPONSE,
        details={"error": str(exc)},
    )


def print_output(data: dict[str, Any] | list[dict[str, Any]], *, json_output: bool, title: str) -> None:
    """Render one record or a list of records; nested values print as JSON in their cell."""
    if json_output:
        print(json.dumps(data, default=str, separators=(",", ":")))
        return

    rows = data if isinstance(data, list) else [data]
    console = Console()
    if not rows:
        console.print(f"{title}: nothing to show")
        return

    columns = list(dict.fromkeys(key for row in rows for key in row))
    table = Table(title=title)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*(_cell(row.get(column)) for column in columns))
    console.print(table)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


def handle_error(exc: DegiroError, *, json_output: bool) -> NoReturn:
    payload = exc.to_error_payload()
    suggestion = payload.get("suggestion") or _default_suggestion(exc.code)
    if suggestion:
        payload["suggestion"] = suggestion

    if json_output:
        print(json.dumps({"ok": False, "error": payload}, default=str, separators=(",", ":")))
    else:
        console = Console()
        console.print(f"[red]{exc.code.value}[/red]: {exc.message}")
        if exc.details:
            console.print_json(json.dumps(exc.details, default=str))
        if suggestion:
            console.print(f"Suggestion: {suggestion}")
    raise typer.Exit(code=exc.exit_code)


def _default_suggestion(code: ErrorCode) -> str | None:
    suggestions = {
        ErrorCode.AUTH_FAILED: "Check DEGIRO_USER / DEGIRO_PASS, or refresh DEGIRO_SID with `degiro login`.",
        ErrorCode.NOT_AUTHENTICATED: "Run `degiro login` or set DEGIRO_SID and DEGIRO_ACCOUNT.",
        ErrorCode.INVALID_ARGS: "Run `degiro --help` or `<command> --help` for valid usage.",
        ErrorCode.PRODUCT_NOT_FOUND: "Try `degiro search <text>` to find the exact symbol.",
        ErrorCode.TRANSPORT_ERROR: "Check network access to trader.degiro.nl and retry.",
    }
    return suggestions.get(code)
