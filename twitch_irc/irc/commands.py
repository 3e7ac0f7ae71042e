"""Builders for the commands the client sends."""

from __future__ import annotations

from ..constants import TWITCH_SERVER_NAME
from .message import IRCMessage

# Capability to request membership state (JOIN/PART of other users).
CAPABILITY_MEMBERSHIP = "twitch.tv/membership"

# Capability to request IRCv3 tags on messages.
CAPABILITY_TAGS = "twitch.tv/tags"

# Capability to request Twitch specific commands (CLEARCHAT, USERSTATE, ...).
CAPABILITY_COMMANDS = "twitch.tv/commands"

TWITCH_CAPABILITIES = (CAPABILITY_MEMBERSHIP, CAPABILITY_TAGS, CAPABILITY_COMMANDS)


def normalize_channel(channel: str) -> str:
    """Return ``#channel`` lower-cased with exactly one leading '#'."""
    name = channel.strip().lstrip("#").lower()
    if not name:
        raise ValueError("channel name must not be empty")
    return f"#{name}"


def pass_(credential: str) -> IRCMessage:
    return IRCMessage(command="PASS", params=[credential])


def nick(nickname: str) -> IRCMessage:
    return IRCMessage(command="NICK", params=[nickname])


def join(channel: str) -> IRCMessage:
    return IRCMessage(command="JOIN", params=[normalize_channel(channel)])


def part(channel: str) -> IRCMessage:
    return IRCMessage(command="PART", params=[normalize_channel(channel)])


def privmsg(channel: str, text: str) -> IRCMessage:
    return IRCMessage(
        command="PRIVMSG", params=[normalize_channel(channel)], trailing=text
    )


def ping(payload: str = TWITCH_SERVER_NAME) -> IRCMessage:
    return IRCMessage(command="PING", trailing=payload)


def pong(payload: str = TWITCH_SERVER_NAME) -> IRCMessage:
    return IRCMessage(command="PONG", trailing=payload)


def cap_req(capability: str) -> IRCMessage:
    return IRCMessage(command="CAP", params=["REQ"], trailing=capability)
