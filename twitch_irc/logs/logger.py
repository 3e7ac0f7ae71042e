"""Structured event logger for the IRC client."""

from __future__ import annotations

import logging

from ..logging_config import debug_enabled
from .event_catalog import EVENT_TEMPLATES

RESERVED_FIELDS = ("user", "channel")


def _text(value: object) -> str | None:
    return value if isinstance(value, str) else None


class ClientLogger:
    """Emits ``<domain>_<action>`` events with text taken from the catalog.

    Every line starts with a fixed width ``[user#channel]`` column. In debug
    mode the event name and the remaining keyword fields are added. No
    handlers are attached here; see ``LoggerConfigurator``.
    """

    EVENT_NAME_WIDTH = 32
    PREFIX_WIDTH = 24

    def __init__(self, name: str = "twitch_irc") -> None:
        self.logger = logging.getLogger(name)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **fields: object,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        if human is None:
            human = self.render(domain, action, fields)
            if (domain, action) not in EVENT_TEMPLATES:
                fields["derived"] = True
        user, channel = (_text(fields.pop(name, None)) for name in RESERVED_FIELDS)

        line = f"{self.column(user, channel)} {human}"
        if debug_enabled():
            event = f"{domain}_{action}".lower()
            if len(event) > self.EVENT_NAME_WIDTH:
                event = event[: self.EVENT_NAME_WIDTH - 1] + "…"
            line = f"{event.ljust(self.EVENT_NAME_WIDTH)} {line}"
            if fields:
                line += " (" + ", ".join(f"{k}={v}" for k, v in fields.items()) + ")"
        self.logger.log(level, line, exc_info=exc_info)

    @staticmethod
    def render(domain: str, action: str, fields: dict[str, object]) -> str:
        template = EVENT_TEMPLATES.get((domain, action))
        if template is None:
            return f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
        try:
            return template.format(**fields)
        except (KeyError, IndexError, ValueError):
            return template

    @classmethod
    def column(cls, user: str | None, channel: str | None) -> str:
        label = user or "system"
        if channel:
            label = f"{label}#{channel.lstrip('#')}"
        return "[" + label[: cls.PREFIX_WIDTH].ljust(cls.PREFIX_WIDTH) + "]"


logger = ClientLogger()
