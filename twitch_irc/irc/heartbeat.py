"""Proactive keepalive probing."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from ..constants import IRC_PING_INTERVAL, IRC_PONG_TIMEOUT
from ..logs.logger import logger
from .commands import ping

if TYPE_CHECKING:  # pragma: no cover
    from .session import IRCSession


class IRCHeartbeat:
    """Sends ``PING :tmi.twitch.tv`` periodically once the session is ready.

    Each probe waits ``timeout`` seconds for the PONG, so probes start every
    ``max(interval, timeout)`` seconds. A missing PONG is only reported;
    transport failures are what end a session.
    """

    def __init__(
        self,
        session: IRCSession,
        interval: float = IRC_PING_INTERVAL,
        timeout: float = IRC_PONG_TIMEOUT,
    ):
        self.session = session
        self.interval = interval
        self.timeout = timeout
        self.missed_pongs = 0

    @property
    def idle_delay(self) -> float:
        """Pause between the end of one probe and the next PING."""
        return max(self.interval - self.timeout, 0.0)

    def pong_since(self, timestamp: float) -> bool:
        last_pong = self.session.last_pong
        return last_pong is not None and last_pong >= timestamp

    async def probe(self) -> bool:
        sent_at = time.time()
        self.session.send_raw(ping())
        logger.log_event(
            "irc", "ping_sent", level=logging.DEBUG, user=self.session.nickname
        )
        await asyncio.sleep(self.timeout)
        if self.pong_since(sent_at):
            self.missed_pongs = 0
            return True
        self.missed_pongs += 1
        logger.log_event(
            "irc",
            "pong_timeout",
            level=logging.WARNING,
            user=self.session.nickname,
            timeout=self.timeout,
            missed=self.missed_pongs,
        )
        return False

    async def run(self) -> None:
        await self.session.ready.wait()
        while True:
            await asyncio.sleep(self.idle_delay)
            await self.probe()
