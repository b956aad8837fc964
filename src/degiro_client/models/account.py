"""Account state models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class Credentials(BaseModel):
    username: str
    password: SecretStr


class CashFunds(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cash_funds: list[dict[str, Any]] = Field(default_factory=list, alias="cashFunds")


class Portfolio(BaseModel):
    portfolio: list[dict[str, Any]] = Field(default_factory=list)
