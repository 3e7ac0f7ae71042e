"""IRC subsystem package.

Contains the message codec, line transport, session state, dispatcher,
built-in protocol callbacks, heartbeat and health modules for Twitch chat.
"""

from .callbacks import (  # noqa: F401
    DEFAULT_CALLBACKS,
    handle_ping,
    is_end_of_twitch_welcome,
    track_end_of_welcome,
    track_pong,
)
from .client import TwitchIRCClient  # noqa: F401
from .dispatcher import IRCDispatcher  # noqa: F401
from .health import IRCHealthMonitor, get_health_snapshot  # noqa: F401
from .heartbeat import IRCHeartbeat  # noqa: F401
from .message import (  # noqa: F401
    IRCMessage,
    IRCPrefix,
    parse_irc_message,
    serialize_irc_message,
)
from .models import SessionState  # noqa: F401
from .session import Callback, IRCSession  # noqa: F401
from .transport import LineTransport  # noqa: F401

__all__ = [
    "Callback",
    "DEFAULT_CALLBACKS",
    "IRCDispatcher",
    "IRCHealthMonitor",
    "IRCHeartbeat",
    "IRCMessage",
    "IRCPrefix",
    "IRCSession",
    "LineTransport",
    "SessionState",
    "TwitchIRCClient",
    "get_health_snapshot",
    "handle_ping",
    "is_end_of_twitch_welcome",
    "parse_irc_message",
    "serialize_irc_message",
    "track_end_of_welcome",
    "track_pong",
]
