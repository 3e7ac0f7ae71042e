"""Built-in protocol handlers registered on every client by default.

Each handler receives the session and the parsed message. They only touch
the session through its send methods and one-shot gates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..constants import RPL_ENDOFMOTD, TWITCH_SERVER_NAME
from .commands import pong
from .message import IRCMessage

if TYPE_CHECKING:  # pragma: no cover
    from .session import IRCSession


def is_end_of_twitch_welcome(message: IRCMessage) -> bool:
    return message.command == RPL_ENDOFMOTD and message.nickname == TWITCH_SERVER_NAME


def handle_ping(session: IRCSession, message: IRCMessage) -> None:
    """Answer a server PING right away, even before login has completed."""
    if message.command != "PING":
        return
    session.send_privileged(pong(message.payload or TWITCH_SERVER_NAME))


def track_end_of_welcome(session: IRCSession, message: IRCMessage) -> None:
    if is_end_of_twitch_welcome(message):
        session.mark_ready()


def track_pong(session: IRCSession, message: IRCMessage) -> None:
    if (
        message.command == "PONG"
        and message.params
        and message.params[0] == TWITCH_SERVER_NAME
    ):
        session.record_pong()


DEFAULT_CALLBACKS = (track_end_of_welcome, handle_ping, track_pong)
