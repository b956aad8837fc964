"""Product catalog search."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from degiro_client.exceptions import MalformedResponseError
from degiro_client.models.products import ProductQuery, ProductSearchResult
from degiro_client.pipeline import RequestPipeline, compact_params

logger = logging.getLogger(__name__)

PRODUCT_LOOKUP_PATH = "/product_search/secure/v4/product/lookup"


class ProductResolver:
    def __init__(self, pipeline: RequestPipeline) -> None:
        self._pipeline = pipeline

    async def search_product(self, query: ProductQuery) -> ProductSearchResult:
        """Search by free text; results keep the server's ranking order."""
        params = {**self._pipeline.authenticated_params(), **compact_params(query.to_params())}
        logger.debug("searchProduct %s", {k: v for k, v in params.items() if k != "sessionId"})
        payload = await self._pipeline.get_json(PRODUCT_LOOKUP_PATH, params=params)
        try:
            return ProductSearchResult.model_validate(payload)
        except ValidationError as exc:
            raise MalformedResponseError(
                "bad product search result",
                details={"error": str(exc)},
            ) from exc
