"""Error taxonomy and error logging helpers."""

from .handling import log_error, run_with_retries  # noqa: F401
from .internal import (  # noqa: F401
    CallbackError,
    ConnectError,
    DisconnectError,
    InternalError,
    NetworkError,
    ParseError,
    SessionStateError,
)

__all__ = [
    "CallbackError",
    "ConnectError",
    "DisconnectError",
    "InternalError",
    "NetworkError",
    "ParseError",
    "SessionStateError",
    "log_error",
    "run_with_retries",
]
