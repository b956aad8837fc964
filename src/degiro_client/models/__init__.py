"""Typed domain models."""

from degiro_client.models.account import CashFunds, Credentials, Portfolio
from degiro_client.models.orders import (
    Action,
    OrderConfirmationToken,
    OrderRequest,
    OrderResult,
    OrderType,
    TimeType,
    TradeRequest,
)
from degiro_client.models.products import (
    DEFAULT_SEARCH_LIMIT,
    Product,
    ProductQuery,
    ProductSearchResult,
    ProductType,
    SortType,
)

__all__ = [
    "Action",
    "CashFunds",
    "Credentials",
    "DEFAULT_SEARCH_LIMIT",
    "OrderConfirmationToken",
    "OrderRequest",
    "OrderResult",
    "OrderType",
    "Portfolio",
    "Product",
    "ProductQuery",
    "ProductSearchResult",
    "ProductType",
    "SortType",
    "TimeType",
    "TradeRequest",
]
