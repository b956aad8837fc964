"""Order placement domain models."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt, field_validator, model_validator

from degiro_client.models.products import ProductType


class Action(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class OrderType(IntEnum):
    LIMITED = 0
    STOP_LIMITED = 1
    MARKET = 2
    STOP_LOSS = 3

    @property
    def needs_price(self) -> bool:
        return self in {OrderType.LIMITED, OrderType.STOP_LIMITED}

    @property
    def needs_stop_price(self) -> bool:
        return self in {OrderType.STOP_LOSS, OrderType.STOP_LIMITED}


class TimeType(IntEnum):
    DAY = 1
    PERMANENT = 3


def _require_prices(order_type: OrderType, price: float | None, stop_price: float | None) -> None:
    if order_type.needs_price and price is None:
        raise ValueError(f"price is required for {order_type.name.lower()} orders")
    if order_type.needs_stop_price and stop_price is None:
        raise ValueError(f"stop_price is required for {order_type.name.lower()} orders")


class OrderRequest(BaseModel):
    """Order body sent verbatim to both the check and the confirm endpoint."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    buysell: Action
    order_type: OrderType = Field(alias="orderType")
    product_id: str = Field(alias="productId")
    size: PositiveInt | PositiveFloat
    time_type: TimeType = Field(default=TimeType.DAY, alias="timeType")
    price: float | None = None
    stop_price: float | None = Field(default=None, alias="stopPrice")

    @model_validator(mode="after")
    def _check_prices(self) -> "OrderRequest":
        _require_prices(self.order_type, self.price, self.stop_price)
        return self

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TradeRequest(BaseModel):
    """Caller intent for a buy or sell, before the product id is known."""

    model_config = ConfigDict(frozen=True)

    action: Action
    symbol: str
    order_type: OrderType
    size: PositiveInt | PositiveFloat
    product_type: ProductType = ProductType.SHARES
    time_type: TimeType = TimeType.DAY
    price: float | None = None
    stop_price: float | None = None

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        symbol = value.strip()
        if not symbol:
            raise ValueError("symbol is required")
        return symbol

    @model_validator(mode="after")
    def _check_prices(self) -> "TradeRequest":
        _require_prices(self.order_type, self.price, self.stop_price)
        return self

    def to_order(self, product_id: str) -> OrderRequest:
        return OrderRequest(
            buysell=self.action,
            order_type=self.order_type,
            product_id=product_id,
            size=self.size,
            time_type=self.time_type,
            price=self.price,
            stop_price=self.stop_price,
        )


class OrderConfirmationToken(BaseModel):
    """Result of a successful check; single use, feed it to confirm once."""

    model_config = ConfigDict(frozen=True)

    order: OrderRequest
    confirmation_id: str


class OrderResult(BaseModel):
    order_id: str
