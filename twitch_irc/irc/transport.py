"""Line framing over an asyncio stream pair."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from ..constants import (
    IRC_CONNECT_TIMEOUT,
    IRC_MAX_LINE_BYTES,
    IRC_SHUTDOWN_TIMEOUT,
    LINE_TERMINATOR,
)
from ..errors import ConnectError, DisconnectError, NetworkError
from ..logs.logger import logger

_TERMINATOR = LINE_TERMINATOR.encode("ascii")


class LineTransport:
    """Owns one TCP connection and exposes it as CRLF terminated lines.

    Closing is left to the owner of the transport; ``close`` is idempotent so
    whichever task notices the failure first can call it.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        *,
        name: str | None = None,
    ) -> None:
        self.reader = reader
        self.writer = writer
        self.name = name
        self._closed = False

    @classmethod
    async def open(
        cls,
        host: str,
        port: int,
        *,
        timeout: float = IRC_CONNECT_TIMEOUT,
        name: str | None = None,
    ) -> LineTransport:
        """Open a TCP connection.

        Raises:
            ConnectError: on DNS/TCP failure or when ``timeout`` elapses.
        """
        context = {"host": host, "port": port}
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port, limit=IRC_MAX_LINE_BYTES),
                timeout=timeout,
            )
        except TimeoutError as e:
            raise ConnectError(
                f"Connecting to {host}:{port} timed out after {timeout}s",
                data={**context, "timeout": timeout},
            ) from e
        except OSError as e:
            raise ConnectError(
                f"Connecting to {host}:{port} failed: {e}", data=context
            ) from e
        return cls(reader, writer, name=name)

    @property
    def closed(self) -> bool:
        return self._closed

    async def read_line(self) -> bytes:
        """Read bytes up to and including the next CRLF.

        Raises:
            DisconnectError: the stream ended before any byte of a new line.
            NetworkError: the stream ended mid-line or the read failed.
        """
        try:
            return await self.reader.readuntil(_TERMINATOR)
        except asyncio.IncompleteReadError as e:
            if not e.partial:
                raise DisconnectError("Connection closed by server") from e
            raise NetworkError(
                "Connection closed in the middle of a line",
                data={"partial": e.partial[:200]},
            ) from e
        except asyncio.LimitOverrunError as e:
            raise NetworkError(
                f"Line exceeds {IRC_MAX_LINE_BYTES} bytes", data={"consumed": e.consumed}
            ) from e
        except OSError as e:
            raise NetworkError(f"Read failed: {e}") from e

    async def lines(self) -> AsyncIterator[bytes]:
        """Yield lines until the server closes the stream.

        Each call starts a fresh iteration over the same stream. A graceful
        disconnect ends the iteration; other failures propagate.
        """
        while True:
            try:
                yield await self.read_line()
            except DisconnectError:
                return

    async def write_line(self, data: bytes) -> None:
        """Write one line with a single write call, adding CRLF if missing.

        Raises:
            NetworkError: when the connection is closed or the write fails.
        """
        if self._closed:
            raise NetworkError("Write on closed connection")
        if not data.endswith(_TERMINATOR):
            data += _TERMINATOR
        try:
            self.writer.write(data)
            await self.writer.drain()
        except OSError as e:
            raise NetworkError(f"Write failed: {e}") from e

    async def close(self, timeout: float = IRC_SHUTDOWN_TIMEOUT) -> bool:
        """Close the connection once. Returns False if already closed.

        A peer that stops reading keeps unsent bytes buffered and the graceful
        close waiting on them; after ``timeout`` seconds the socket is aborted.
        """
        if self._closed:
            return False
        self._closed = True
        self.writer.close()
        try:
            await asyncio.wait_for(self.writer.wait_closed(), timeout=timeout)
        except TimeoutError:
            self.writer.transport.abort()
            logger.log_event(
                "irc",
                "close_error",
                level=logging.WARNING,
                user=self.name,
                error=f"close did not finish within {timeout}s, connection aborted",
            )
        except OSError as e:
            logger.log_event(
                "irc",
                "close_error",
                level=logging.WARNING,
                user=self.name,
                error=str(e),
            )
        logger.log_event("irc", "connection_closed", level=logging.DEBUG, user=self.name)
        return True
