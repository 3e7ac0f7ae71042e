"""Async Twitch IRC client engine."""

from __future__ import annotations

import asyncio
import logging
import secrets
from collections.abc import Callable, Iterable
from typing import Any

from ..constants import (
    ANONYMOUS_NICK_PREFIX,
    IRC_CONNECT_TIMEOUT,
    IRC_PING_INTERVAL,
    IRC_PONG_TIMEOUT,
    IRC_QUEUE_SIZE,
    IRC_SHUTDOWN_TIMEOUT,
    TWITCH_IRC_HOST,
    TWITCH_IRC_PORT,
)
from ..errors import ConnectError, DisconnectError, NetworkError, ParseError, log_error
from ..logs.logger import logger
from .callbacks import DEFAULT_CALLBACKS
from .dispatcher import IRCDispatcher
from .health import IRCHealthMonitor
from .heartbeat import IRCHeartbeat
from .message import parse_irc_message
from .session import Callback, IRCSession
from .transport import LineTransport


def anonymous_nickname() -> str:
    return f"{ANONYMOUS_NICK_PREFIX}{secrets.randbelow(90000) + 10000}"


def _redact(line: str) -> str:
    return "PASS ***" if line.startswith("PASS ") else line


class TwitchIRCClient:  # pylint: disable=too-many-instance-attributes
    """Runs one Twitch chat session at a time.

    ``connect`` opens the connection and queues the login lines; ``run``
    drives the read, write and dispatch tasks until the connection ends or
    shutdown is requested. Callbacks are called in registration order for
    every inbound message; the built-in protocol handlers come first.
    """

    def __init__(
        self,
        nickname: str | None = None,
        password: str = "anonymous",
        *,
        server: str = TWITCH_IRC_HOST,
        port: int = TWITCH_IRC_PORT,
        callbacks: Iterable[Callback] = (),
        queue_size: int = IRC_QUEUE_SIZE,
        connect_timeout: float = IRC_CONNECT_TIMEOUT,
        ping_interval: float = IRC_PING_INTERVAL,
        pong_timeout: float = IRC_PONG_TIMEOUT,
        shutdown_timeout: float = IRC_SHUTDOWN_TIMEOUT,
    ):
        self.nickname = (nickname or anonymous_nickname()).lower()
        self.password = password
        self.server = server
        self.port = port
        self.queue_size = queue_size
        self.connect_timeout = connect_timeout
        self.ping_interval = ping_interval
        self.pong_timeout = pong_timeout
        self.shutdown_timeout = shutdown_timeout
        self.callbacks: list[Callback] = [*DEFAULT_CALLBACKS, *callbacks]

    def register_callback(self, callback: Callback) -> Callback:
        """Append a handler; usable as a decorator. Handlers are never removed."""
        self.callbacks.append(callback)
        return callback

    async def connect(self) -> IRCSession:
        """Open the connection and queue PASS/NICK ahead of anything else.

        Cancelling the awaiting task abandons the attempt.

        Raises:
            ConnectError: DNS/TCP failure or connect timeout.
        """
        logger.log_event(
            "irc",
            "connect_start",
            user=self.nickname,
            server=self.server,
            port=self.port,
        )
        try:
            transport = await LineTransport.open(
                self.server,
                self.port,
                timeout=self.connect_timeout,
                name=self.nickname,
            )
        except ConnectError as e:
            logger.log_event(
                "irc",
                "connect_failed",
                level=logging.ERROR,
                user=self.nickname,
                server=self.server,
                port=self.port,
                error=str(e),
            )
            raise
        session = IRCSession(
            transport,
            nickname=self.nickname,
            password=self.password,
            callbacks=self.callbacks,
            queue_size=self.queue_size,
        )
        session.send_login()
        logger.log_event(
            "irc",
            "connect_success",
            user=self.nickname,
            server=self.server,
            port=self.port,
        )
        return session

    async def run(self, session: IRCSession) -> NetworkError | None:
        """Run the session until it terminates.

        Returns:
            The error that ended the session, or None after ``request_shutdown``.
        """
        reader = asyncio.create_task(self._read_loop(session), name="irc-read")
        writer = asyncio.create_task(self._write_loop(session), name="irc-write")
        shutdown = asyncio.create_task(session.wait_shutdown(), name="irc-shutdown")
        background = [
            asyncio.create_task(IRCDispatcher(session).run(), name="irc-dispatch"),
            asyncio.create_task(session.release_gated(), name="irc-gate"),
        ]
        if self.ping_interval > 0:
            heartbeat = IRCHeartbeat(session, self.ping_interval, self.pong_timeout)
            background.append(asyncio.create_task(heartbeat.run(), name="irc-heartbeat"))
        logger.log_event("irc", "run_start", level=logging.DEBUG, user=session.nickname)

        try:
            done, _ = await asyncio.wait(
                {reader, writer, shutdown}, return_when=asyncio.FIRST_COMPLETED
            )
            result: NetworkError | None = None
            for task in (reader, writer):
                if task in done and result is None:
                    result = task.result()
            if result is None:
                session.mark_terminating("shutdown")
        finally:
            await self._teardown(session, [reader, writer, shutdown, *background])
        return result

    async def serve(
        self, on_session: Callable[[IRCSession], Any] | None = None
    ) -> None:
        """Connect and run once; a terminal error is raised instead of returned."""
        session = await self.connect()
        if on_session is not None:
            on_session(session)
        result = await self.run(session)
        if result is not None:
            raise result

    def health(self, session: IRCSession) -> IRCHealthMonitor:
        stale_after = (
            self.ping_interval + self.pong_timeout if self.ping_interval > 0 else None
        )
        return IRCHealthMonitor(session, pong_stale_after=stale_after)

    async def _read_loop(self, session: IRCSession) -> NetworkError | None:
        transport = session.transport
        try:
            while True:
                data = await transport.read_line()
                line = data.decode("utf-8", errors="ignore")
                try:
                    message = parse_irc_message(line)
                except ParseError as e:
                    logger.log_event(
                        "irc",
                        "parse_error",
                        level=logging.WARNING,
                        user=session.nickname,
                        error=str(e),
                        raw=line.rstrip("\r\n"),
                    )
                    continue
                logger.log_event(
                    "irc",
                    "raw_in",
                    level=logging.DEBUG,
                    user=session.nickname,
                    raw=line.rstrip("\r\n"),
                )
                await session.inbound.put(message)
        except DisconnectError as e:
            logger.log_event(
                "irc", "read_disconnect", level=logging.WARNING, user=session.nickname
            )
            session.mark_terminating("disconnect")
            return e
        except NetworkError as e:
            logger.log_event(
                "irc",
                "read_error",
                level=logging.ERROR,
                user=session.nickname,
                error=str(e),
            )
            log_error("Read loop failed", e, context={"user": session.nickname})
            session.mark_terminating("read_error")
            return e

    async def _write_loop(self, session: IRCSession) -> NetworkError | None:
        transport = session.transport
        while True:
            data = await session.outbound.get()
            try:
                await transport.write_line(data)
            except NetworkError as e:
                logger.log_event(
                    "irc",
                    "write_error",
                    level=logging.ERROR,
                    user=session.nickname,
                    error=str(e),
                )
                log_error("Write loop failed", e, context={"user": session.nickname})
                session.mark_terminating("write_error")
                return e
            logger.log_event(
                "irc",
                "raw_out",
                level=logging.DEBUG,
                user=session.nickname,
                raw=_redact(data.decode("utf-8", errors="ignore").rstrip("\r\n")),
            )

    async def _teardown(self, session: IRCSession, tasks: list[asyncio.Task]) -> None:
        session.mark_terminating("cancelled")
        for task in tasks:
            task.cancel()
        # A read blocked on the socket only returns once the socket is closed.
        await session.close(timeout=self.shutdown_timeout)
        done, pending = await asyncio.wait(tasks, timeout=self.shutdown_timeout)
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                log_error(
                    f"Task {task.get_name()} failed",
                    task.exception(),
                    context={"user": session.nickname},
                )
        if pending:
            logger.log_event(
                "irc",
                "task_shutdown_timeout",
                level=logging.WARNING,
                user=session.nickname,
                timeout=self.shutdown_timeout,
                pending=len(pending),
            )
