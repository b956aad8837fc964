from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

import degiro_client.config as degiro_config
from degiro_client import DegiroClient
from degiro_client.config import ClientConfig

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def clear_degiro_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in list(os.environ.keys()):
        if key.startswith("DEGIRO_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(degiro_config, "DEFAULT_CONFIG_JSON", tmp_path / "missing-config.json")


@pytest.fixture
def make_client() -> Callable[..., DegiroClient]:
    """Client wired to an in-process transport, pre-seeded with a session by default."""

    def _make(
        handler: Handler,
        *,
        session_id: str | None = "tok",
        account: int | None = 1001,
        **cfg: Any,
    ) -> DegiroClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return DegiroClient(ClientConfig(session_id=session_id, account=account, **cfg), http=http)

    return _make
