"""Async client for the DeGiro trading web API."""

from degiro_client.client import DegiroClient
from degiro_client.config import ClientConfig, load_config
from degiro_client.exceptions import (
    ApiError,
    AuthenticationError,
    DegiroError,
    ErrorCode,
    MalformedResponseError,
    ProductNotFoundError,
)
from degiro_client.models import Action, OrderType, ProductType, SortType, TimeType
from degiro_client.orders import OrderWorkflow, WorkflowState
from degiro_client.session import Session

__all__ = [
    "Action",
    "ApiError",
    "AuthenticationError",
    "ClientConfig",
    "DegiroClient",
    "DegiroError",
    "ErrorCode",
    "MalformedResponseError",
    "OrderType",
    "OrderWorkflow",
    "ProductNotFoundError",
    "ProductType",
    "Session",
    "SortType",
    "TimeType",
    "WorkflowState",
    "load_config",
]
