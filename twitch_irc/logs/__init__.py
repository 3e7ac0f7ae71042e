"""Structured event logging: the ``ClientLogger`` and its template catalog."""

from .event_catalog import (  # noqa: F401
    EVENT_TEMPLATES,
    load_event_templates,
    reload_event_templates,
)
from .logger import ClientLogger, logger  # noqa: F401

__all__ = [
    "ClientLogger",
    "EVENT_TEMPLATES",
    "load_event_templates",
    "logger",
    "reload_event_templates",
]
