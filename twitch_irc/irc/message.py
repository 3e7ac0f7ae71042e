"""IRC line parsing and serialization.

Pure functions over ``IRCMessage``; no I/O. Line grammar::

    ["@" tags " "] [":" prefix " "] command [" " params] [" :" trailing] CRLF

No escaping is performed in either direction. Values produced by this package
round-trip; arbitrary server input is parsed leniently (malformed tag pairs
are dropped).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..constants import LINE_TERMINATOR
from ..errors import ParseError


@dataclass(frozen=True, slots=True)
class IRCPrefix:
    """Sender identity ``nickname[!username][@hostname]``."""

    nickname: str
    username: str | None = None
    hostname: str | None = None

    def __str__(self) -> str:
        text = self.nickname
        if self.username:
            text += f"!{self.username}"
        if self.hostname:
            text += f"@{self.hostname}"
        return text


@dataclass(slots=True)
class IRCMessage:
    """One protocol line.

    ``tags`` is ``None`` when the line has no ``@`` segment, ``prefix`` is
    ``None`` without a ``:`` sender segment and ``trailing`` is ``None``
    without a trailing argument. ``raw`` keeps the received line and does not
    take part in comparisons.
    """

    command: str
    params: list[str] = field(default_factory=list)
    trailing: str | None = None
    tags: dict[str, str] | None = None
    prefix: IRCPrefix | None = None
    raw: str | None = field(default=None, compare=False, repr=False)

    @classmethod
    def parse(cls, line: str) -> IRCMessage:
        return parse_irc_message(line)

    def serialize(self) -> str:
        return serialize_irc_message(self)

    def encode(self) -> bytes:
        return self.serialize().encode("utf-8")

    @property
    def nickname(self) -> str | None:
        return self.prefix.nickname if self.prefix else None

    @property
    def payload(self) -> str | None:
        """Trailing text, or the last middle parameter when there is none."""
        if self.trailing is not None:
            return self.trailing
        return self.params[-1] if self.params else None


def parse_irc_message(line: str) -> IRCMessage:
    """Parse a CRLF terminated line into an ``IRCMessage``.

    Raises:
        ParseError: when the terminator is missing or the command is empty.
    """
    if not line.endswith(LINE_TERMINATOR):
        raise ParseError("missing line terminator", data={"line": line})
    working = line[: -len(LINE_TERMINATOR)]

    tags: dict[str, str] | None = None
    if working.startswith("@"):
        segment, _, working = working.partition(" ")
        tags = _parse_tags(segment[1:])

    prefix: IRCPrefix | None = None
    if working.startswith(":"):
        segment, _, working = working.partition(" ")
        prefix = _parse_prefix(segment[1:])

    command, has_rest, rest = working.partition(" ")
    if not command:
        raise ParseError("empty command", data={"line": line})
    if not has_rest:
        return IRCMessage(command=command, tags=tags, prefix=prefix, raw=line)

    middle, trailing = _split_trailing(rest)
    params = [p for p in middle.split(" ") if p]
    return IRCMessage(
        command=command,
        params=params,
        trailing=trailing,
        tags=tags,
        prefix=prefix,
        raw=line,
    )


def _parse_tags(raw_tags: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for pair in raw_tags.split(";"):
        parts = pair.split("=")
        if len(parts) != 2:
            continue
        tags[parts[0]] = parts[1]
    return tags


def _parse_prefix(raw_prefix: str) -> IRCPrefix:
    # nick[!user][@host]; hostname is split first so "nick@host" keeps the host.
    head, _, hostname = raw_prefix.partition("@")
    nickname, _, username = head.partition("!")
    return IRCPrefix(nickname=nickname, username=username or None, hostname=hostname or None)


def _split_trailing(rest: str) -> tuple[str, str | None]:
    # The trailing argument starts at the first colon that opens a token.
    if rest.startswith(":"):
        return "", rest[1:]
    idx = rest.find(" :")
    if idx == -1:
        return rest, None
    return rest[:idx], rest[idx + 2 :]


def serialize_irc_message(message: IRCMessage) -> str:
    """Render ``message`` as a CRLF terminated line."""
    parts: list[str] = []
    if message.tags is not None:
        tag_text = ";".join(f"{k}={v}" for k, v in message.tags.items())
        parts.append(f"@{tag_text} ")
    if message.prefix is not None:
        parts.append(f":{message.prefix} ")
    parts.append(message.command)
    for param in message.params:
        parts.append(f" {param}")
    if message.trailing is not None:
        parts.append(f" :{message.trailing}")
    parts.append(LINE_TERMINATOR)
    return "".join(parts)


__all__ = ["IRCMessage", "IRCPrefix", "parse_irc_message", "serialize_irc_message"]
