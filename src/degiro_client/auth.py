"""Credential login and account resolution."""

from __future__ import annotations

import logging
from typing import Any

from degiro_client.exceptions import AuthenticationError, MalformedResponseError
from degiro_client.models.account import Credentials
from degiro_client.pipeline import RequestPipeline
from degiro_client.session import Session

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login/securityCheck"
CLIENT_INFO_PATH = "/pa/secure/client"
SESSION_COOKIE = "JSESSIONID"
LOGIN_SUGGESTION = "Verify DEGIRO_USER and DEGIRO_PASS and retry."


class Authenticator:
    """Sole writer of the session: logs in, then resolves the account id."""

    def __init__(self, pipeline: RequestPipeline) -> None:
        self._pipeline = pipeline

    @property
    def session(self) -> Session:
        return self._pipeline.session

    async def login(self, credentials: Credentials) -> Session:
        logger.debug("login %s ********", credentials.username)
        response = await self._pipeline.request(
            "POST",
            LOGIN_PATH,
            form={
                "j_username": credentials.username,
                "j_password": credentials.password.get_secret_value(),
            },
            follow_redirects=False,
        )
        token = response.cookies.get(SESSION_COOKIE)
        if not token:
            # Bad credentials and unexpected login pages look the same here;
            # the status code is kept so callers can tell them apart.
            raise AuthenticationError(
                "login failed: no session cookie in response",
                details={"status_code": response.status_code},
                suggestion=LOGIN_SUGGESTION,
            )

        account_id = await self.update_client_info(token)
        self.session.replace(token, account_id)
        logger.info("logged in, account %s", account_id)
        return self.session

    async def update_client_info(self, token: str) -> int:
        logger.debug("updateClientInfo")
        payload = await self._pipeline.get_json(CLIENT_INFO_PATH, params={"sessionId": token})
        return _extract_int_account(payload)


def _extract_int_account(payload: Any) -> int:
    # Older responses carry the id at the top level, newer ones under "data".
    candidates = [payload]
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        candidates.append(payload["data"])
    for body in candidates:
        if not isinstance(body, dict):
            continue
        value = body.get("intAccount")
        if isinstance(value, bool):
            continue
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
    raise MalformedResponseError(
        "client info response has no intAccount",
        details={"keys": sorted(payload) if isinstance(payload, dict) else type(payload).__name__},
    )
