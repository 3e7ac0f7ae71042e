"""Centralized internal error hierarchy.

These exceptions give semantic categories to the failures a chat session can
run into. Raw ``OSError``/``asyncio`` errors never leave the transport layer;
they are wrapped into one of these first.

Classes:
  InternalError      Base for all internal errors.
  NetworkError       Read or write failure on a live session (fatal to it).
  ConnectError       DNS/TCP failure while opening the session.
  DisconnectError    Clean end-of-stream from the server.
  ParseError         Malformed inbound line (line dropped, session continues).
  CallbackError      A handler reported failure (isolated, logged).
  SessionStateError  An illegal lifecycle transition was requested.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        self.data = dict(data) if data else {}


class NetworkError(InternalError):
    """Exception raised when reading from or writing to the connection fails.

    Ends the session it occurs on and becomes the terminal result of
    ``TwitchIRCClient.run``.
    """


class ConnectError(NetworkError):
    """Exception raised when the connection cannot be established.

    Covers DNS resolution failures, refused connections and connect timeouts.
    No retry is attempted by the client itself.
    """


class DisconnectError(NetworkError):
    """Exception raised when the server closes the stream cleanly.

    Terminates the session exactly like a ``NetworkError`` but is logged as a
    graceful disconnect.
    """


class ParseError(InternalError):
    """Exception raised for a line that does not follow the IRC line grammar."""


class CallbackError(InternalError):
    """Exception a user callback may raise to report a handled failure.

    Nothing inside the client raises it. The dispatcher logs it like any
    other callback failure, and ``log_error`` files it under ``callback``.
    """


class SessionStateError(InternalError):
    """Exception raised for a lifecycle transition the state machine forbids."""


__all__ = [
    "InternalError",
    "NetworkError",
    "ConnectError",
    "DisconnectError",
    "ParseError",
    "CallbackError",
    "SessionStateError",
]
