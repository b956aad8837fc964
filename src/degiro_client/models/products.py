"""Product catalog models and search options."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_SEARCH_LIMIT = 7


class ProductType(Enum):
    # ALL has no wire value: the productType parameter is left out of the query.
    ALL = None
    SHARES = 1
    BONDS = 2
    FUTURES = 7
    OPTIONS = 8
    INVESTMENT_FUNDS = 13
    LEVERAGED_PRODUCTS = 14
    ETFS = 131
    CFDS = 535
    WARRANTS = 536


class SortType(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ProductQuery(BaseModel):
    """Every search option with its default; unset options are never sent."""

    model_config = ConfigDict(frozen=True)

    text: str
    product_type: ProductType = ProductType.ALL
    sort_column: str | None = None
    sort_type: SortType | None = None
    limit: int = Field(default=DEFAULT_SEARCH_LIMIT, ge=1)
    offset: int = Field(default=0, ge=0)

    def to_params(self) -> dict[str, Any]:
        return {
            "searchText": self.text,
            "productType": self.product_type,
            "sortColumn": self.sort_column,
            "sortType": self.sort_type,
            "limit": self.limit,
            "offset": self.offset,
        }


class Product(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    id: str
    symbol: str | None = None
    name: str | None = None
    product_type: str | None = Field(default=None, alias="productType")
    currency: str | None = None
    isin: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value


class ProductSearchResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    data: list[Product] = Field(default_factory=list)

    @property
    def first(self) -> Product | None:
        return self.data[0] if self.data else None
