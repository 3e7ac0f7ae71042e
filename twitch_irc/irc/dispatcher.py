"""Inbound message dispatch."""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING

from ..errors import log_error
from ..logs.logger import logger
from .message import IRCMessage

if TYPE_CHECKING:  # pragma: no cover
    from .session import IRCSession


class IRCDispatcher:
    def __init__(self, session: IRCSession):
        self.session = session

    async def run(self) -> None:
        """Deliver inbound messages to every callback until cancelled."""
        inbound = self.session.inbound
        while True:
            message = await inbound.get()
            await self.dispatch(message)

    async def dispatch(self, message: IRCMessage) -> None:
        for callback in self.session.callbacks:
            await self._invoke(callback, message)

    async def _invoke(self, callback, message: IRCMessage) -> None:  # type: ignore[no-untyped-def]
        try:
            result = callback(self.session, message)
            if inspect.isawaitable(result):
                await result
        except Exception as e:  # noqa: BLE001
            name = getattr(callback, "__qualname__", repr(callback))
            logger.log_event(
                "irc",
                "callback_error",
                level=logging.ERROR,
                user=self.session.nickname,
                callback=name,
                error=str(e),
                error_type=type(e).__name__,
                command=message.command,
            )
            log_error(
                f"Callback {name} failed",
                e,
                context={"command": message.command},
            )
