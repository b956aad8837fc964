"""Session-scoped request pipeline shared by every client operation."""

from __future__ import annotations

from enum import Enum
import logging
from typing import Any, Mapping

import httpx
from pydantic import BaseModel, SkipValidation

from degiro_client.exceptions import ApiError
from degiro_client.session import Session, SessionCredentials

logger = logging.getLogger(__name__)

BASE_URL = "https://trader.degiro.nl"
TRADING_PATH = "/trading/secure/v5"
JSON_CONTENT_TYPE = "application/json;charset=UTF-8"


class ActionSucceeded(BaseModel):
    payload: SkipValidation[dict[str, Any]]


class ActionFailed(BaseModel):
    status: Any = None
    message: str


ActionResult = ActionSucceeded | ActionFailed


def compact_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """Unwrap enums and drop absent values so they never reach the query string."""
    out: dict[str, Any] = {}
    for key, value in params.items():
        if isinstance(value, Enum):
            value = value.value
        if value is None:
            continue
        out[key] = value
    return out


def decode_action_result(payload: Any) -> ActionResult:
    """Classify a write response by its `status` field; 0 is the only success."""
    if not isinstance(payload, dict):
        return ActionFailed(message=f"unexpected action response: {payload!r}")
    status = payload.get("status")
    if isinstance(status, int) and not isinstance(status, bool) and status == 0:
        return ActionSucceeded(payload=payload)
    message = payload.get("message")
    if not isinstance(message, str):
        message = f"action failed with status {status!r}"
    return ActionFailed(status=status, message=message)


def check_success(payload: Any) -> dict[str, Any]:
    result = decode_action_result(payload)
    if isinstance(result, ActionFailed):
        raise ApiError(result.message, status=result.status if isinstance(result.status, int) else None)
    return result.payload


class RequestPipeline:
    """Builds authenticated URLs, issues the HTTP call and decodes JSON.

    Reads are returned as decoded; writes go through `check_success`. Every
    authenticated call snapshots the session once, so one request never mixes
    a token and an account id from different logins.
    """

    def __init__(self, http: httpx.AsyncClient, session: Session, *, base_url: str = BASE_URL) -> None:
        self._http = http
        self._session = session
        self._base_url = base_url.rstrip("/")

    @property
    def session(self) -> Session:
        return self._session

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
        form: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = False,
    ) -> httpx.Response:
        url = path if path.startswith("http") else f"{self._base_url}{path}"
        return await self._http.request(
            method,
            url,
            params=compact_params(params) if params else None,
            json=json_body,
            data=form,
            headers=headers,
            follow_redirects=follow_redirects,
        )

    async def get_json(self, path: str, *, params: Mapping[str, Any] | None = None) -> Any:
        response = await self.request("GET", path, params=params)
        return response.json()

    async def read_data(self, options: Mapping[str, Any] | None = None) -> Any:
        creds = self._session.require()
        params = compact_params(options or {})
        logger.debug("getData %s", params)
        return await self.get_json(
            f"{TRADING_PATH}/update/{creds.account_id};jsessionid={creds.token}",
            params=params,
        )

    async def write_action(self, path: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        creds = self._session.require()
        response = await self.request(
            "POST",
            self._action_url(path, creds),
            params={"intAccount": creds.account_id, "sessionId": creds.token},
            json_body=dict(payload),
            headers={"Content-Type": JSON_CONTENT_TYPE},
        )
        return check_success(response.json())

    def authenticated_params(self) -> dict[str, Any]:
        creds = self._session.require()
        return {"intAccount": creds.account_id, "sessionId": creds.token}

    @staticmethod
    def _action_url(path: str, creds: SessionCredentials) -> str:
        return f"{TRADING_PATH}/{path.strip('/')};jsessionid={creds.token}"
