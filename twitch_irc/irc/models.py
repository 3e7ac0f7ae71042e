"""Shared IRC session models."""

from __future__ import annotations

from enum import Enum, auto


class SessionState(Enum):
    CONNECTING = auto()
    AUTHENTICATING = auto()
    READY = auto()
    TERMINATING = auto()
    CLOSED = auto()


# Allowed forward transitions; anything else is a SessionStateError.
SESSION_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.CONNECTING: frozenset(
        {SessionState.AUTHENTICATING, SessionState.TERMINATING}
    ),
    SessionState.AUTHENTICATING: frozenset(
        {SessionState.READY, SessionState.TERMINATING}
    ),
    SessionState.READY: frozenset({SessionState.TERMINATING}),
    SessionState.TERMINATING: frozenset({SessionState.CLOSED}),
    SessionState.CLOSED: frozenset(),
}


def can_transition(old: SessionState, new: SessionState) -> bool:
    return new in SESSION_TRANSITIONS[old]
