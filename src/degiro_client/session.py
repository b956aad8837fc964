"""Session state shared by every request of one client."""

from __future__ import annotations

from dataclasses import dataclass

from degiro_client.exceptions import AuthenticationError, ErrorCode

LOGIN_SUGGESTION = "Call `login()` first, or configure DEGIRO_SID and DEGIRO_ACCOUNT."


@dataclass(frozen=True)
class SessionCredentials:
    """An authenticated session: both halves present."""

    token: str
    account_id: int


@dataclass
class Session:
    """Current session token and account id.

    Written only by the authenticator, read by every request. Unsynchronized:
    callers must not run a login concurrently with other calls on one client.
    """

    token: str | None = None
    account_id: int | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.account_id is not None

    def require(self) -> SessionCredentials:
        if not self.token or self.account_id is None:
            raise AuthenticationError(
                "session is not authenticated",
                code=ErrorCode.NOT_AUTHENTICATED,
                details={"has_token": bool(self.token), "has_account": self.account_id is not None},
                suggestion=LOGIN_SUGGESTION,
            )
        return SessionCredentials(token=self.token, account_id=self.account_id)

    def replace(self, token: str, account_id: int) -> None:
        self.token = token
        self.account_id = account_id
