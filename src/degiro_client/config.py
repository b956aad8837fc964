"""Client config loading from config.json plus env overrides."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, SecretStr, field_validator

from degiro_client.pipeline import BASE_URL


def _env_path(name: str, fallback: Path) -> Path:
    raw = os.environ.get(name, "").strip()
    return Path(raw).expanduser() if raw else fallback.expanduser()


_XDG_CONFIG_HOME = _env_path("XDG_CONFIG_HOME", Path.home() / ".config")
DEFAULT_CONFIG_HOME = _XDG_CONFIG_HOME / "degiro"
DEFAULT_CONFIG_JSON = _env_path("DEGIRO_CONFIG_JSON", DEFAULT_CONFIG_HOME / "config.json")

ENV_PREFIX = "DEGIRO_"
# Short names accepted alongside DEGIRO_<FIELD>.
ENV_ALIASES = {
    "DEGIRO_USER": "username",
    "DEGIRO_PASS": "password",
    "DEGIRO_SID": "session_id",
    "DEGIRO_ACCOUNT": "account",
}


class ClientConfig(BaseModel):
    username: str | None = None
    password: SecretStr | None = None
    session_id: str | None = None
    account: int | None = None
    debug: bool = False
    base_url: str = BASE_URL
    timeout_seconds: float = Field(default=15.0, gt=0)
    log_level: str = "INFO"

    @field_validator("username", "session_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level '{value}'")
        return level

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) and self.password is not None

    @property
    def has_session(self) -> bool:
        return bool(self.session_id) and self.account is not None


def _read_config_json(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    try:
        loaded = json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        return {}

    if not isinstance(loaded, dict):
        return {}
    section = loaded.get("degiro")
    return dict(section) if isinstance(section, dict) else loaded


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    result = dict(data)
    fields = set(ClientConfig.model_fields)
    for key, raw in os.environ.items():
        if key in ENV_ALIASES:
            result[ENV_ALIASES[key]] = raw
            continue
        if not key.startswith(ENV_PREFIX):
            continue
        field = key[len(ENV_PREFIX) :].lower()
        if field in fields:
            result[field] = raw
    return result


def load_config(path: Path | None = None, **overrides: Any) -> ClientConfig:
    """Merge file, environment and explicit overrides, in increasing priority."""
    raw = _read_config_json(path or DEFAULT_CONFIG_JSON)
    merged = _apply_env_overrides(raw)
    merged.update({key: value for key, value in overrides.items() if value is not None})
    return ClientConfig.model_validate(merged)
