from __future__ import annotations

import httpx
import pytest

from degiro_client.exceptions import DegiroError, ErrorCode, MalformedResponseError
from degiro_client.models import ProductType, SortType


def _recording(seen: list[httpx.Request], payload: object):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=payload)

    return handler


@pytest.mark.asyncio
async def test_search_omits_unset_options(make_client) -> None:
    seen: list[httpx.Request] = []
    client = make_client(_recording(seen, {"data": []}))

    await client.search_product("AAPL", limit=1)

    request = seen[0]
    assert request.url.path == "/product_search/secure/v4/product/lookup"
    assert dict(request.url.params) == {
        "intAccount": "1001",
        "sessionId": "tok",
        "searchText": "AAPL",
        "limit": "1",
        "offset": "0",
    }
    query = request.url.query.decode("ascii")
    for absent in ("sortColumn", "sortType", "productType"):
        assert absent not in query


@pytest.mark.asyncio
async def test_search_sends_every_supplied_option(make_client) -> None:
    seen: list[httpx.Request] = []
    client = make_client(_recording(seen, {"data": []}))

    await client.search_product(
        "Netflix",
        product_type=ProductType.SHARES,
        sort_column="name",
        sort_type=SortType.ASC,
        limit=20,
        offset=40,
    )

    params = dict(seen[0].url.params)
    assert params["searchText"] == "Netflix"
    assert params["productType"] == "1"
    assert params["sortColumn"] == "name"
    assert params["sortType"] == "asc"
    assert params["limit"] == "20"
    assert params["offset"] == "40"


@pytest.mark.asyncio
async def test_search_defaults_limit_and_offset(make_client) -> None:
    seen: list[httpx.Request] = []
    client = make_client(_recording(seen, {"data": []}))

    await client.search_product("NFLX")

    params = dict(seen[0].url.params)
    assert params["limit"] == "7"
    assert params["offset"] == "0"


@pytest.mark.asyncio
async def test_search_returns_products_in_server_order(make_client) -> None:
    seen: list[httpx.Request] = []
    payload = {
        "data": [
            {"id": "331868", "symbol": "AAPL", "productType": "STOCK", "name": "Apple Inc", "isin": "US0378331005"},
            {"id": 1157, "symbol": "AAPL", "productType": "OPTION", "vwdId": "x"},
        ],
        "offset": 0,
    }
    client = make_client(_recording(seen, payload))

    result = await client.search_product("AAPL")

    assert [product.id for product in result.data] == ["331868", "1157"]
    assert result.first is not None
    assert result.first.product_type == "STOCK"
    assert result.data[1].model_extra == {"vwdId": "x"}


@pytest.mark.asyncio
async def test_search_without_data_key_is_empty(make_client) -> None:
    client = make_client(_recording([], {"offset": 0}))

    result = await client.search_product("ZZZZ")

    assert result.data == []
    assert result.first is None


@pytest.mark.asyncio
async def test_search_rejects_non_object_payload(make_client) -> None:
    client = make_client(_recording([], ["not", "an", "object"]))

    with pytest.raises(MalformedResponseError):
        await client.search_product("AAPL")


@pytest.mark.asyncio
async def test_search_validates_arguments_locally(make_client) -> None:
    seen: list[httpx.Request] = []
    client = make_client(_recording(seen, {"data": []}))

    with pytest.raises(DegiroError) as exc:
        await client.search_product("AAPL", limit=0)
    assert exc.value.code == ErrorCode.INVALID_ARGS
    assert seen == []
