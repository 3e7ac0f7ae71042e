"""Asyncio client for the Twitch chat IRC dialect."""

from .irc import (  # noqa: F401
    IRCMessage,
    IRCPrefix,
    IRCSession,
    SessionState,
    TwitchIRCClient,
    parse_irc_message,
    serialize_irc_message,
)

__all__ = [
    "IRCMessage",
    "IRCPrefix",
    "IRCSession",
    "SessionState",
    "TwitchIRCClient",
    "parse_irc_message",
    "serialize_irc_message",
]
