"""Live session state shared by the client tasks and the callbacks."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from ..constants import IRC_QUEUE_SIZE, IRC_SHUTDOWN_TIMEOUT, LINE_TERMINATOR
from ..errors import SessionStateError
from ..logs.logger import logger
from . import commands
from .message import IRCMessage
from .models import SessionState, can_transition

if TYPE_CHECKING:  # pragma: no cover
    from .transport import LineTransport

Callback = Callable[["IRCSession", IRCMessage], Awaitable[None] | None]


def encode_line(message: IRCMessage | str) -> bytes:
    if isinstance(message, IRCMessage):
        return message.encode()
    if not message.endswith(LINE_TERMINATOR):
        message += LINE_TERMINATOR
    return message.encode("utf-8")


class IRCSession:  # pylint: disable=too-many-instance-attributes
    """One connection and everything derived from it.

    Outbound lines travel through two queues. Privileged lines (login and
    keepalive replies) go straight to ``outbound``. Everything else lands in
    ``gated`` and is moved to ``outbound`` in FIFO order by
    ``release_gated`` once both ``login_sent`` and ``ready`` are set. Both
    gates are one-shot: they are never cleared.
    """

    def __init__(
        self,
        transport: LineTransport,
        *,
        nickname: str,
        password: str,
        callbacks: list[Callback] | None = None,
        queue_size: int = IRC_QUEUE_SIZE,
    ) -> None:
        self.transport = transport
        self.nickname = nickname
        self.password = password
        self.callbacks: list[Callback] = callbacks if callbacks is not None else []
        self.outbound: asyncio.Queue[bytes] = asyncio.Queue(maxsize=queue_size)
        self.inbound: asyncio.Queue[IRCMessage] = asyncio.Queue(maxsize=queue_size)
        self.gated: asyncio.Queue[bytes] = asyncio.Queue(maxsize=queue_size)
        self.login_sent = asyncio.Event()
        self.ready = asyncio.Event()
        self.last_pong: float | None = None
        self.created_at = time.time()
        self.state = SessionState.CONNECTING
        self.terminate_reason: str | None = None
        self._shutdown = asyncio.Event()

    # State -----------------------------------------------------------------

    def _set_state(self, new_state: SessionState) -> None:
        if self.state == new_state:
            return
        if not can_transition(self.state, new_state):
            raise SessionStateError(
                f"Illegal transition {self.state.name} -> {new_state.name}",
                data={"old_state": self.state.name, "new_state": new_state.name},
            )
        logger.log_event(
            "irc",
            "state_change",
            level=logging.DEBUG,
            user=self.nickname,
            old_state=self.state.name,
            new_state=new_state.name,
        )
        self.state = new_state

    @property
    def is_ready(self) -> bool:
        return self.ready.is_set()

    @property
    def is_terminating(self) -> bool:
        return self.state in (SessionState.TERMINATING, SessionState.CLOSED)

    def mark_ready(self) -> bool:
        """Open the readiness gate. Returns True only on the first call that does."""
        if self.state == SessionState.READY:
            return False
        if self.state != SessionState.AUTHENTICATING:
            logger.log_event(
                "irc",
                "ready_ignored",
                level=logging.DEBUG,
                user=self.nickname,
                state=self.state.name,
            )
            return False
        self._set_state(SessionState.READY)
        self.ready.set()
        logger.log_event("irc", "ready", user=self.nickname)
        return True

    def mark_terminating(self, reason: str) -> None:
        if self.is_terminating:
            return
        self.terminate_reason = reason
        self._set_state(SessionState.TERMINATING)
        logger.log_event(
            "irc",
            "session_terminated",
            level=logging.DEBUG,
            user=self.nickname,
            reason=reason,
        )

    async def close(self, timeout: float = IRC_SHUTDOWN_TIMEOUT) -> bool:
        """Close the connection and finish the lifecycle. Safe to call repeatedly.

        ``timeout`` bounds the graceful close before the socket is aborted.
        """
        self.mark_terminating("closed")
        closed = await self.transport.close(timeout=timeout)
        if self.state == SessionState.TERMINATING:
            self._set_state(SessionState.CLOSED)
        return closed

    def record_pong(self) -> None:
        self.last_pong = time.time()
        logger.log_event("irc", "pong_received", level=logging.DEBUG, user=self.nickname)

    def request_shutdown(self) -> None:
        logger.log_event("irc", "shutdown_requested", user=self.nickname)
        self._shutdown.set()

    async def wait_shutdown(self) -> None:
        await self._shutdown.wait()

    async def wait_ready(self, timeout: float | None = None) -> bool:
        """Wait for the readiness gate. Returns False on timeout."""
        try:
            await asyncio.wait_for(self.ready.wait(), timeout=timeout)
        except TimeoutError:
            return False
        return True

    # Sending ---------------------------------------------------------------

    def _enqueue(self, queue: asyncio.Queue[bytes], line: bytes, queue_name: str) -> bool:
        try:
            queue.put_nowait(line)
        except asyncio.QueueFull:
            logger.log_event(
                "irc",
                "queue_full",
                level=logging.WARNING,
                user=self.nickname,
                queue=queue_name,
                size=queue.maxsize,
                command=line.split(b" ", 1)[0].decode("utf-8", errors="ignore").strip(),
            )
            return False
        return True

    def send_privileged(self, message: IRCMessage | str) -> bool:
        """Queue a line for immediate writing, bypassing the readiness gate.

        Returns False when the outbound queue is full; the line is dropped.
        """
        return self._enqueue(self.outbound, encode_line(message), "outbound")

    def send_raw(self, message: IRCMessage | str) -> bool:
        """Queue a line that is written only after login has completed.

        Never blocks; lines queued before readiness keep their call order.
        Returns False when the gated queue is full; the line is dropped and a
        ``queue_full`` warning is logged.
        """
        return self._enqueue(self.gated, encode_line(message), "gated")

    def send_login(self) -> None:
        self.send_privileged(commands.pass_(self.password))
        self.send_privileged(commands.nick(self.nickname))
        self.login_sent.set()
        self._set_state(SessionState.AUTHENTICATING)
        logger.log_event("irc", "login_sent", level=logging.DEBUG, user=self.nickname)

    def request_capability(self, capability: str) -> bool:
        logger.log_event(
            "irc",
            "capability_requested",
            level=logging.DEBUG,
            user=self.nickname,
            capability=capability,
        )
        return self.send_raw(commands.cap_req(capability))

    def join(self, channel: str) -> bool:
        return self.send_raw(commands.join(channel))

    def part(self, channel: str) -> bool:
        return self.send_raw(commands.part(channel))

    def privmsg(self, channel: str, text: str) -> bool:
        return self.send_raw(commands.privmsg(channel, text))

    async def release_gated(self) -> None:
        """Move gated lines to the outbound queue once login has completed."""
        await self.login_sent.wait()
        await self.ready.wait()
        while True:
            line = await self.gated.get()
            await self.outbound.put(line)
