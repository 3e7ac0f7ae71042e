"""Configuration package exports."""

from .loader import ConfigError, load_config  # noqa: F401
from .model import ClientConfig  # noqa: F401

__all__ = ["ClientConfig", "ConfigError", "load_config"]
