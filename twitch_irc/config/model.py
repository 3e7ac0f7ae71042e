from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..constants import (
    IRC_CONNECT_TIMEOUT,
    IRC_PING_INTERVAL,
    IRC_PONG_TIMEOUT,
    TWITCH_IRC_HOST,
    TWITCH_IRC_PORT,
)


class ClientConfig(BaseModel):
    """Settings for one chat session started from the entry point.

    Attributes:
        nickname: Login name; None selects an anonymous ``justinfan`` login.
        password: Credential sent with PASS (``oauth:<token>`` for real users).
        server: Chat endpoint host.
        port: Chat endpoint port (plaintext).
        channels: Channels to join once logged in, normalized without '#'.
        capabilities: Capabilities requested once logged in.
        connect_timeout: Seconds allowed for the TCP connect.
        ping_interval: Seconds between proactive PINGs, 0 to disable.
        pong_timeout: Seconds to wait for a PONG before warning.
        max_attempts: Session attempts made by the supervisor (1 = no retry).
    """

    nickname: str | None = Field(default=None, min_length=1, max_length=25)
    password: str = "anonymous"
    server: str = TWITCH_IRC_HOST
    port: int = Field(default=TWITCH_IRC_PORT, ge=1, le=65535)
    channels: list[str] = Field(default_factory=list)
    capabilities: list[str] = Field(default_factory=list)
    connect_timeout: float = Field(default=IRC_CONNECT_TIMEOUT, gt=0)
    ping_interval: float = Field(default=IRC_PING_INTERVAL, ge=0)
    pong_timeout: float = Field(default=IRC_PONG_TIMEOUT, gt=0)
    max_attempts: int = Field(default=1, ge=1)

    @field_validator("nickname", mode="before")
    @classmethod
    def normalize_nickname(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @field_validator("channels", mode="before")
    @classmethod
    def validate_channels(cls, v: Any) -> list[str]:
        """Strip whitespace and leading '#', lower-case, dedupe and sort."""
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, list):
            raise ValueError("channels must be a list")
        validated = []
        for c in v:
            if isinstance(c, str):
                stripped = c.strip().lstrip("#").lower()
                if stripped:
                    validated.append(stripped)
        return sorted(dict.fromkeys(validated))

    @property
    def is_anonymous(self) -> bool:
        return self.nickname is None
