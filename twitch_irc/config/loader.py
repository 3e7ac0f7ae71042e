"""Configuration loading utilities."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import InternalError
from .model import ClientConfig

# Environment variable -> ClientConfig field
ENV_OVERRIDES = {
    "TWITCH_IRC_NICK": "nickname",
    "TWITCH_IRC_PASS": "password",
    "TWITCH_IRC_CHANNELS": "channels",
    "TWITCH_IRC_SERVER": "server",
    "TWITCH_IRC_PORT": "port",
    "TWITCH_IRC_MAX_ATTEMPTS": "max_attempts",
}


class ConfigError(InternalError):
    """Raised when the configuration file or values are invalid."""


def _read_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}", data={"path": str(path)}) from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}", data={"path": str(path)}) from e
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return dict(raw)


def load_config(
    path: str | Path | None = None, environ: Mapping[str, str] | None = None
) -> ClientConfig:
    """Build a validated ``ClientConfig``.

    Values come from the optional JSON file first, then environment variables
    listed in ``ENV_OVERRIDES`` take precedence.

    Raises:
        ConfigError: unreadable file or values failing validation.
    """
    environ = os.environ if environ is None else environ
    data: dict[str, Any] = _read_file(Path(path)) if path else {}
    for env_name, field_name in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            data[field_name] = value
    try:
        return ClientConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}", data={"errors": e.errors()}) from e
