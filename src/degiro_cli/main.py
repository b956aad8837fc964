"""Root Typer app and command registration."""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError

from degiro_cli import orders
from degiro_cli._common import (
    CLIState,
    as_degiro_error,
    build_typer,
    configure_logging,
    get_state,
    handle_error,
    print_output,
    resolve_json_mode,
    run_command,
)
from degiro_client import DegiroClient
from degiro_client.config import load_config
from degiro_client.models import SortType

app = build_typer(
    """DeGiro command-line interface for account state and order entry.

    Examples:
      degiro login
      degiro cash
      degiro search "Netflix" --type shares
      degiro buy AAPL 10 --order-type limit --price 180
    """
)

app.command("buy", help="Search SYMBOL, check the order, then confirm it (market by default).")(orders.buy)
app.command("sell", help="Search SYMBOL, check the order, then confirm it (market by default).")(orders.sell)


@app.callback()
def root(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Emit machine-readable JSON only."),
    debug: bool = typer.Option(False, "--debug", help="Trace every request at DEBUG level."),
    config: str | None = typer.Option(
        None,
        "--config",
        help="Path to config.json (default: ~/.config/degiro/config.json).",
    ),
) -> None:
    json_mode = resolve_json_mode(json_output)
    try:
        cfg = load_config(None if config is None else Path(config), debug=debug or None)
    except ValidationError as exc:
        handle_error(as_degiro_error(exc), json_output=json_mode)
    configure_logging(cfg)
    ctx.obj = CLIState(config=cfg, json_output=json_mode)


@app.command("login", help="Log in and print the session id and account for DEGIRO_SID / DEGIRO_ACCOUNT.")
def login(ctx: typer.Context) -> None:
    state = get_state(ctx)

    async def _login(client: DegiroClient) -> dict[str, object]:
        session = await client.login()
        return {"session_id": session.token, "account": session.account_id}

    data = run_command(state, _login, authenticate=False)
    print_output(data, json_output=state.json_output, title="Session")


@app.command("cash", help="Show cash funds per currency.")
def cash(ctx: typer.Context) -> None:
    state = get_state(ctx)
    data = run_command(state, lambda client: client.get_cash_funds())
    print_output(data.cash_funds, json_output=state.json_output, title="Cash funds")


@app.command("portfolio", help="Show portfolio positions as returned by the server.")
def portfolio(ctx: typer.Context) -> None:
    state = get_state(ctx)
    data = run_command(state, lambda client: client.get_portfolio())
    print_output(data.portfolio, json_output=state.json_output, title="Portfolio")


@app.command("search", help="Search the product catalog by name or symbol.")
def search(
    ctx: typer.Context,
    text: str = typer.Argument(..., help='Search term, e.g. "Netflix" or NFLX.'),
    product_type: orders.ProductKind = typer.Option(orders.ProductKind.ALL, "--type", case_sensitive=False),
    sort_column: str | None = typer.Option(None, "--sort-column", help="Column to sort by, e.g. name."),
    sort_type: SortType | None = typer.Option(None, "--sort-type", case_sensitive=False),
    limit: int = typer.Option(7, "--limit", min=1),
    offset: int = typer.Option(0, "--offset", min=0),
) -> None:
    state = get_state(ctx)
    data = run_command(
        state,
        lambda client: client.search_product(
            text,
            product_type=orders.PRODUCT_TYPES[product_type],
            sort_column=sort_column,
            sort_type=sort_type,
            limit=limit,
            offset=offset,
        ),
    )
    rows = [product.model_dump(by_alias=True, exclude_none=True) for product in data.data]
    print_output(rows, json_output=state.json_output, title="Products")


def run() -> None:
    app()
