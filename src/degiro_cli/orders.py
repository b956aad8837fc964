"""Order entry commands."""

from __future__ import annotations

from enum import Enum

import typer

from degiro_cli._common import get_state, print_output, run_command
from degiro_client.models import Action, OrderType, ProductType, TimeType


class OrderKind(str, Enum):
    LIMIT = "limit"
    MARKET = "market"
    STOP_LOSS = "stop-loss"
    STOP_LIMIT = "stop-limit"


class TimeKind(str, Enum):
    DAY = "day"
    PERMANENT = "permanent"


class ProductKind(str, Enum):
    ALL = "all"
    SHARES = "shares"
    BONDS = "bonds"
    FUTURES = "futures"
    OPTIONS = "options"
    FUNDS = "funds"
    LEVERAGED = "leveraged"
    ETFS = "etfs"
    CFDS = "cfds"
    WARRANTS = "warrants"


ORDER_TYPES = {
    OrderKind.LIMIT: OrderType.LIMITED,
    OrderKind.MARKET: OrderType.MARKET,
    OrderKind.STOP_LOSS: OrderType.STOP_LOSS,
    OrderKind.STOP_LIMIT: OrderType.STOP_LIMITED,
}
TIME_TYPES = {TimeKind.DAY: TimeType.DAY, TimeKind.PERMANENT: TimeType.PERMANENT}
PRODUCT_TYPES = {
    ProductKind.ALL: ProductType.ALL,
    ProductKind.SHARES: ProductType.SHARES,
    ProductKind.BONDS: ProductType.BONDS,
    ProductKind.FUTURES: ProductType.FUTURES,
    ProductKind.OPTIONS: ProductType.OPTIONS,
    ProductKind.FUNDS: ProductType.INVESTMENT_FUNDS,
    ProductKind.LEVERAGED: ProductType.LEVERAGED_PRODUCTS,
    ProductKind.ETFS: ProductType.ETFS,
    ProductKind.CFDS: ProductType.CFDS,
    ProductKind.WARRANTS: ProductType.WARRANTS,
}


def buy(
    ctx: typer.Context,
    symbol: str = typer.Argument(..., help="Product symbol, e.g. AAPL."),
    size: float = typer.Argument(..., min=0.000001, help="Number of units (> 0)."),
    order_type: OrderKind = typer.Option(OrderKind.MARKET, "--order-type", case_sensitive=False),
    price: float | None = typer.Option(None, "--price", help="Limit price (limit, stop-limit)."),
    stop_price: float | None = typer.Option(None, "--stop-price", help="Stop price (stop-loss, stop-limit)."),
    time_type: TimeKind = typer.Option(TimeKind.DAY, "--time-type", case_sensitive=False),
    product_type: ProductKind = typer.Option(ProductKind.SHARES, "--product-type", case_sensitive=False),
) -> None:
    _place(ctx, Action.BUY, symbol, size, order_type, price, stop_price, time_type, product_type)


def sell(
    ctx: typer.Context,
    symbol: str = typer.Argument(..., help="Product symbol, e.g. AAPL."),
    size: float = typer.Argument(..., min=0.000001, help="Number of units (> 0)."),
    order_type: OrderKind = typer.Option(OrderKind.MARKET, "--order-type", case_sensitive=False),
    price: float | None = typer.Option(None, "--price", help="Limit price (limit, stop-limit)."),
    stop_price: float | None = typer.Option(None, "--stop-price", help="Stop price (stop-loss, stop-limit)."),
    time_type: TimeKind = typer.Option(TimeKind.DAY, "--time-type", case_sensitive=False),
    product_type: ProductKind = typer.Option(ProductKind.SHARES, "--product-type", case_sensitive=False),
) -> None:
    _place(ctx, Action.SELL, symbol, size, order_type, price, stop_price, time_type, product_type)


def _place(
    ctx: typer.Context,
    action: Action,
    symbol: str,
    size: float,
    order_type: OrderKind,
    price: float | None,
    stop_price: float | None,
    time_type: TimeKind,
    product_type: ProductKind,
) -> None:
    state = get_state(ctx)
    place = {Action.BUY: "buy", Action.SELL: "sell"}[action]
    units = int(size) if size.is_integer() else size
    result = run_command(
        state,
        lambda client: getattr(client, place)(
            symbol,
            units,
            order_type=ORDER_TYPES[order_type],
            product_type=PRODUCT_TYPES[product_type],
            time_type=TIME_TYPES[time_type],
            price=price,
            stop_price=stop_price,
        ),
    )
    print_output(result.model_dump(), json_output=state.json_output, title="Order")
