"""Two-phase order placement: search, check, confirm."""

from __future__ import annotations

from enum import Enum
import logging
from typing import Any

from degiro_client.exceptions import MalformedResponseError, ProductNotFoundError
from degiro_client.models.orders import OrderConfirmationToken, OrderRequest, OrderResult, TradeRequest
from degiro_client.models.products import Product, ProductQuery
from degiro_client.pipeline import RequestPipeline
from degiro_client.products import ProductResolver

logger = logging.getLogger(__name__)

CHECK_ORDER_PATH = "checkOrder"


def confirm_order_path(confirmation_id: str) -> str:
    return f"order/{confirmation_id}"


class WorkflowState(str, Enum):
    SEARCHING = "searching"
    CHECKING = "checking"
    CONFIRMING = "confirming"
    DONE = "done"
    FAILED = "failed"


async def check_order(pipeline: RequestPipeline, order: OrderRequest) -> OrderConfirmationToken:
    """Validate and price an order server-side without executing it."""
    body = order.to_wire()
    logger.debug("checkOrder %s", body)
    payload = await pipeline.write_action(CHECK_ORDER_PATH, body)
    confirmation_id = _required_str(payload, "confirmationId", operation="checkOrder")
    return OrderConfirmationToken(order=order, confirmation_id=confirmation_id)


async def confirm_order(pipeline: RequestPipeline, token: OrderConfirmationToken) -> OrderResult:
    """Submit a checked order for execution. Not idempotent: use each token once."""
    body = token.order.to_wire()
    logger.debug("confirmOrder %s confirmation=%s", body, token.confirmation_id)
    payload = await pipeline.write_action(confirm_order_path(token.confirmation_id), body)
    return OrderResult(order_id=_required_str(payload, "orderId", operation="confirmOrder"))


class OrderWorkflow:
    """One buy or sell run, moving SEARCHING -> CHECKING -> CONFIRMING -> DONE.

    Any error moves the run to FAILED and is re-raised unchanged. Earlier
    steps are never undone: after a failed confirm, `confirmation` still holds
    the checked order so the caller can decide whether to confirm it manually.
    """

    def __init__(self, pipeline: RequestPipeline, resolver: ProductResolver) -> None:
        self._pipeline = pipeline
        self._resolver = resolver
        self.state = WorkflowState.SEARCHING
        self.product: Product | None = None
        self.confirmation: OrderConfirmationToken | None = None
        self.result: OrderResult | None = None
        self.error: Exception | None = None

    async def run(self, trade: TradeRequest) -> OrderResult:
        if self.state is not WorkflowState.SEARCHING or self.error is not None:
            raise RuntimeError(f"order workflow already ran (state={self.state.value})")
        try:
            self.product = await self._search(trade)

            self._advance(WorkflowState.CHECKING)
            self.confirmation = await check_order(self._pipeline, trade.to_order(self.product.id))

            self._advance(WorkflowState.CONFIRMING)
            self.result = await confirm_order(self._pipeline, self.confirmation)

            self._advance(WorkflowState.DONE)
            return self.result
        except Exception as exc:
            logger.debug("order workflow failed in %s: %s", self.state.value, exc)
            self.error = exc
            self.state = WorkflowState.FAILED
            raise

    async def _search(self, trade: TradeRequest) -> Product:
        found = await self._resolver.search_product(
            ProductQuery(text=trade.symbol, product_type=trade.product_type, limit=1)
        )
        # Server ranking is trusted as-is.
        product = found.first
        if product is None:
            raise ProductNotFoundError(
                f"product not found: {trade.symbol}",
                details={"symbol": trade.symbol, "product_type": trade.product_type.name},
            )
        return product

    def _advance(self, state: WorkflowState) -> None:
        logger.debug("order workflow %s -> %s", self.state.value, state.value)
        self.state = state


def _required_str(payload: dict[str, Any], key: str, *, operation: str) -> str:
    value = payload.get(key)
    if value is None or value == "":
        raise MalformedResponseError(f"{operation} response has no {key}", details={"operation": operation})
    return str(value)
