"""
Configuration constants for the Twitch IRC client

Tunables can be overridden by setting an environment variable with the same
name. Platform constants are fixed.
"""

import os


def _env_number(name, default, cast):
    """Read a numeric tunable from the environment.

    Unset variables give ``default``; unparsable ones print a warning and give
    ``default`` too (logging is not configured yet at import time).
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        print(f"Warning: ignoring {name}='{raw}', not a valid {cast.__name__}")
        return default


# Platform endpoint (plaintext, no TLS)
TWITCH_IRC_HOST = "irc.chat.twitch.tv"
TWITCH_IRC_PORT = 6667

# Server identity used in prefixes, PING payloads and PONG replies
TWITCH_SERVER_NAME = "tmi.twitch.tv"

# Numeric reply closing the welcome banner
RPL_ENDOFMOTD = "376"

LINE_TERMINATOR = "\r\n"

# Anonymous read-only login
ANONYMOUS_NICK_PREFIX = "justinfan"

# Capacity of the inbound, outbound and gated queues
IRC_QUEUE_SIZE = _env_number("IRC_QUEUE_SIZE", 8192, int)

# Seconds allowed for DNS + TCP connect
IRC_CONNECT_TIMEOUT = _env_number("IRC_CONNECT_TIMEOUT", 10.0, float)

# Seconds between proactive PINGs once ready (0 disables the heartbeat)
IRC_PING_INTERVAL = _env_number("IRC_PING_INTERVAL", 0.0, float)

# Seconds to wait for the matching PONG before warning
IRC_PONG_TIMEOUT = _env_number("IRC_PONG_TIMEOUT", 10.0, float)

# Seconds to wait for background tasks to unwind after termination
IRC_SHUTDOWN_TIMEOUT = _env_number("IRC_SHUTDOWN_TIMEOUT", 5.0, float)

# Maximum bytes buffered while looking for a line terminator
IRC_MAX_LINE_BYTES = _env_number("IRC_MAX_LINE_BYTES", 64 * 1024, int)
