"""Read-only account operations: cash funds and portfolio."""

from __future__ import annotations

from typing import Any

from degiro_client.exceptions import MalformedResponseError
from degiro_client.models.account import CashFunds, Portfolio
from degiro_client.pipeline import RequestPipeline

CASH_FUND_DROPPED_FIELDS = frozenset({"handling", "currencyCode"})


class AccountReader:
    def __init__(self, pipeline: RequestPipeline) -> None:
        self._pipeline = pipeline

    async def get_cash_funds(self) -> CashFunds:
        data = await self._pipeline.read_data({"cashFunds": 0})
        rows = _section_values(data, "cashFunds")
        return CashFunds(cash_funds=[_flatten_cash_fund(row) for row in rows])

    async def get_portfolio(self) -> Portfolio:
        data = await self._pipeline.read_data({"portfolio": 0})
        return Portfolio(portfolio=_section_values(data, "portfolio"))


def _section_values(data: Any, section: str) -> list[Any]:
    body = data.get(section) if isinstance(data, dict) else None
    if isinstance(body, dict) and isinstance(body.get("value"), list):
        return body["value"]
    raise MalformedResponseError(
        f"bad {section} result",
        details={"section": section, "payload": data},
    )


def _flatten_cash_fund(row: Any) -> dict[str, Any]:
    pairs = row.get("value") if isinstance(row, dict) else None
    if not isinstance(pairs, list):
        raise MalformedResponseError("bad cashFunds entry", details={"entry": row})
    out: dict[str, Any] = {}
    for pair in pairs:
        if not isinstance(pair, dict) or "name" not in pair:
            raise MalformedResponseError("bad cashFunds field", details={"field": pair})
        name = pair["name"]
        if name in CASH_FUND_DROPPED_FIELDS:
            continue
        out[name] = pair.get("value")
    return out
