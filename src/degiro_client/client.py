"""Async DeGiro web API client."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx
from pydantic import ValidationError

from degiro_client.account import AccountReader
from degiro_client.auth import Authenticator
from degiro_client.config import ClientConfig, load_config
from degiro_client.exceptions import AuthenticationError, DegiroError, ErrorCode
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
from degiro_client.models.products import DEFAULT_SEARCH_LIMIT, ProductQuery, ProductSearchResult, ProductType, SortType
from degiro_client.orders import OrderWorkflow, check_order, confirm_order
from degiro_client.pipeline import RequestPipeline
from degiro_client.products import ProductResolver
from degiro_client.session import Session

logger = logging.getLogger(__name__)
package_logger = logging.getLogger("degiro_client")

DEBUG_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class DegiroClient:
    """One logical DeGiro session.

    Operations are independent coroutines sharing one unsynchronized session:
    let `login()` finish before issuing anything else on the same client.
    With `debug` set, the `degiro_client` logger traces at DEBUG until
    `aclose()` restores its previous level.
    """

    def __init__(self, cfg: ClientConfig, *, http: httpx.AsyncClient | None = None) -> None:
        self._cfg = cfg
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=httpx.Timeout(cfg.timeout_seconds))
        self._session = Session(token=cfg.session_id, account_id=cfg.account)
        self._pipeline = RequestPipeline(self._http, self._session, base_url=cfg.base_url)
        self._auth = Authenticator(self._pipeline)
        self._account = AccountReader(self._pipeline)
        self._products = ProductResolver(self._pipeline)
        self._saved_log_level: int | None = None
        self._debug_handler: logging.Handler | None = None
        if cfg.debug:
            self._enable_debug_logging()

    @classmethod
    def create(
        cls,
        *,
        username: str | None = None,
        password: str | None = None,
        session_id: str | None = None,
        account: int | None = None,
        debug: bool | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> "DegiroClient":
        """Build a client; explicit arguments win over config file and environment."""
        cfg = load_config(
            username=username,
            password=password,
            session_id=session_id,
            account=account,
            debug=debug,
        )
        return cls(cfg, http=http)

    async def __aenter__(self) -> "DegiroClient":
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self._restore_logging()
        if self._owns_http:
            await self._http.aclose()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    async def login(self) -> Session:
        if not self._cfg.has_credentials:
            raise AuthenticationError(
                "username and password are required to log in",
                code=ErrorCode.INVALID_ARGS,
                suggestion="Set DEGIRO_USER and DEGIRO_PASS, or pass username/password.",
            )
        return await self._auth.login(Credentials(username=self._cfg.username, password=self._cfg.password))

    async def get_data(self, options: Mapping[str, Any] | None = None) -> Any:
        return await self._pipeline.read_data(options)

    async def get_cash_funds(self) -> CashFunds:
        return await self._account.get_cash_funds()

    async def get_portfolio(self) -> Portfolio:
        return await self._account.get_portfolio()

    async def search_product(
        self,
        text: str,
        *,
        product_type: ProductType = ProductType.ALL,
        sort_column: str | None = None,
        sort_type: SortType | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
        offset: int = 0,
    ) -> ProductSearchResult:
        query = _validated(
            ProductQuery,
            text=text,
            product_type=product_type,
            sort_column=sort_column,
            sort_type=sort_type,
            limit=limit,
            offset=offset,
        )
        return await self._products.search_product(query)

    async def check_order(self, order: OrderRequest) -> OrderConfirmationToken:
        return await check_order(self._pipeline, order)

    async def confirm_order(self, token: OrderConfirmationToken) -> OrderResult:
        return await confirm_order(self._pipeline, token)

    async def buy(
        self,
        symbol: str,
        size: float,
        *,
        order_type: OrderType,
        product_type: ProductType = ProductType.SHARES,
        time_type: TimeType = TimeType.DAY,
        price: float | None = None,
        stop_price: float | None = None,
    ) -> OrderResult:
        return await self._trade(
            Action.BUY,
            symbol,
            size,
            order_type=order_type,
            product_type=product_type,
            time_type=time_type,
            price=price,
            stop_price=stop_price,
        )

    async def sell(
        self,
        symbol: str,
        size: float,
        *,
        order_type: OrderType,
        product_type: ProductType = ProductType.SHARES,
        time_type: TimeType = TimeType.DAY,
        price: float | None = None,
        stop_price: float | None = None,
    ) -> OrderResult:
        return await self._trade(
            Action.SELL,
            symbol,
            size,
            order_type=order_type,
            product_type=product_type,
            time_type=time_type,
            price=price,
            stop_price=stop_price,
        )

    def _enable_debug_logging(self) -> None:
        """Trace requests at DEBUG until `aclose()`; prints to stderr when nothing else is configured."""
        self._saved_log_level = package_logger.level
        package_logger.setLevel(logging.DEBUG)
        if not package_logger.hasHandlers():
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(DEBUG_LOG_FORMAT))
            package_logger.addHandler(handler)
            self._debug_handler = handler

    def _restore_logging(self) -> None:
        if self._debug_handler is not None:
            package_logger.removeHandler(self._debug_handler)
            self._debug_handler = None
        if self._saved_log_level is not None:
            package_logger.setLevel(self._saved_log_level)
            self._saved_log_level = None

    def new_order_workflow(self) -> OrderWorkflow:
        return OrderWorkflow(self._pipeline, self._products)

    async def _trade(self, action: Action, symbol: str, size: float, **options: Any) -> OrderResult:
        trade = _validated(TradeRequest, action=action, symbol=symbol, size=size, **options)
        logger.info("%s %s x%s (%s)", action.value.lower(), trade.symbol, trade.size, trade.order_type.name)
        return await self.new_order_workflow().run(trade)


def _validated(model: Any, **values: Any) -> Any:
    try:
        return model(**values)
    except ValidationError as exc:
        raise DegiroError(
            f"invalid {model.__name__} arguments",
            code=ErrorCode.INVALID_ARGS,
            details={"errors": [err["msg"] for err in exc.errors()]},
        ) from exc
