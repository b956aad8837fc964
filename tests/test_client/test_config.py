from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable

import httpx
import pytest
from pydantic import ValidationError

from degiro_client import DegiroClient
from degiro_client import config as degiro_config
from degiro_client.pipeline import BASE_URL


def test_defaults_without_file_or_env() -> None:
    cfg = degiro_config.load_config()

    assert cfg.username is None
    assert cfg.password is None
    assert cfg.session_id is None
    assert cfg.account is None
    assert cfg.debug is False
    assert cfg.base_url == BASE_URL
    assert not cfg.has_credentials
    assert not cfg.has_session


def test_short_env_names_are_recognized(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEGIRO_USER", "alice")
    monkeypatch.setenv("DEGIRO_PASS", "s3cret")
    monkeypatch.setenv("DEGIRO_SID", "ABC.prod")
    monkeypatch.setenv("DEGIRO_ACCOUNT", "4242")
    monkeypatch.setenv("DEGIRO_DEBUG", "true")

    cfg = degiro_config.load_config()

    assert cfg.username == "alice"
    assert cfg.password is not None and cfg.password.get_secret_value() == "s3cret"
    assert "s3cret" not in repr(cfg)
    assert cfg.session_id == "ABC.prod"
    assert cfg.account == 4242
    assert cfg.debug is True
    assert cfg.has_credentials and cfg.has_session


def test_json_file_then_env_then_explicit_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_json = tmp_path / "config.json"
    config_json.write_text(
        json.dumps({"degiro": {"username": "from-file", "timeout_seconds": 30, "log_level": "warning"}}),
        encoding="utf-8",
    )
    monkeypatch.setenv("DEGIRO_TIMEOUT_SECONDS", "45")
    monkeypatch.setenv("DEGIRO_CONFIG_JSON", str(config_json))

    cfg = degiro_config.load_config(config_json, username="explicit")

    assert cfg.username == "explicit"
    assert cfg.timeout_seconds == 45
    assert cfg.log_level == "WARNING"


def test_unreadable_json_file_is_ignored(tmp_path: Path) -> None:
    config_json = tmp_path / "config.json"
    config_json.write_text("{not json", encoding="utf-8")

    assert degiro_config.load_config(config_json).username is None


def test_invalid_values_are_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEGIRO_ACCOUNT", "not-a-number")
    with pytest.raises(ValidationError):
        degiro_config.load_config()


def test_blank_session_id_counts_as_absent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEGIRO_SID", "   ")
    monkeypatch.setenv("DEGIRO_ACCOUNT", "1")
    assert degiro_config.load_config().has_session is False


@pytest.mark.asyncio
async def test_create_preseeds_session_and_debug_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEGIRO_ACCOUNT", "7")
    monkeypatch.setattr(logging.getLogger("degiro_client"), "level", logging.NOTSET)

    async with DegiroClient.create(session_id="sid", debug=True) as client:
        assert client.session.token == "sid"
        assert client.session.account_id == 7
        assert client.session.is_authenticated
        assert logging.getLogger("degiro_client").level == logging.DEBUG
    assert logging.getLogger("degiro_client").level == logging.NOTSET


def _portfolio_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"portfolio": {"value": []}})


@pytest.mark.asyncio
async def test_debug_trace_reaches_stderr_without_logging_setup(
    make_client: Callable[..., DegiroClient],
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    package_logger = logging.getLogger("degiro_client")
    monkeypatch.setattr(package_logger, "level", logging.NOTSET)
    monkeypatch.setattr(package_logger, "hasHandlers", lambda: False)
    handlers_before = list(package_logger.handlers)

    async with make_client(_portfolio_handler, debug=True) as client:
        await client.get_portfolio()

    assert "getData" in capsys.readouterr().err
    assert package_logger.handlers == handlers_before
    assert package_logger.level == logging.NOTSET


@pytest.mark.asyncio
async def test_debug_trace_uses_configured_handlers(
    make_client: Callable[..., DegiroClient],
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    package_logger = logging.getLogger("degiro_client")
    monkeypatch.setattr(package_logger, "level", logging.NOTSET)
    handlers_before = list(package_logger.handlers)

    async with make_client(_portfolio_handler, debug=True) as client:
        assert package_logger.handlers == handlers_before
        await client.get_portfolio()

    assert any(record.getMessage().startswith("getData") for record in caplog.records)


@pytest.mark.asyncio
async def test_client_without_debug_leaves_logger_alone(
    make_client: Callable[..., DegiroClient],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    package_logger = logging.getLogger("degiro_client")
    monkeypatch.setattr(package_logger, "level", logging.WARNING)

    async with make_client(_portfolio_handler) as client:
        await client.get_portfolio()
        assert package_logger.level == logging.WARNING
