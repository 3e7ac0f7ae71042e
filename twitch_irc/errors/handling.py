from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..logging_config import log_structured_error
from .internal import (
    CallbackError,
    InternalError,
    NetworkError,
    ParseError,
    SessionStateError,
)

T = TypeVar("T")


# First match wins, so subclasses precede their bases.
ERROR_CATEGORIES = (
    ((NetworkError, OSError), "network"),
    (ParseError, "parsing"),
    (CallbackError, "callback"),
    (SessionStateError, "state"),
    (InternalError, "internal"),
)


def error_category(error: BaseException) -> str:
    for kinds, category in ERROR_CATEGORIES:
        if isinstance(error, kinds):
            return category
    return "unknown"


def log_error(message: str, error: BaseException, context: dict | None = None) -> None:
    """Log ``error`` under its category and count it in the error aggregator.

    Args:
        message: What the caller was doing when the error happened.
        error: The caught exception.
        context: Extra key/value pairs such as the session nickname.
    """
    log_structured_error(
        error_type=error_category(error),
        message=f"{message}: {error}",
        exception=error,
        context=context,
    )


async def run_with_retries(
    operation: Callable[[], Awaitable[T]],
    context: str,
    max_attempts: int = 1,
) -> T:
    """Run an async operation, retrying it while it fails with network errors.

    This is a caller-level supervisor: the client itself never reconnects.
    With ``max_attempts=1`` the operation runs exactly once and its error
    propagates unchanged.

    Args:
        operation: Async callable without arguments.
        context: Descriptive context used in log lines.
        max_attempts: Total number of attempts (>= 1).

    Returns:
        The result of the first successful attempt.

    Raises:
        The last exception raised by the operation once attempts are exhausted.
    """

    def announce_retry(retry_state):
        if retry_state.attempt_number > 1:
            logging.info(
                f"Retrying {context} "
                f"(attempt {retry_state.attempt_number}/{max_attempts})"
            )

    def report_failure(retry_state):
        if retry_state.outcome.failed:
            log_error(
                f"Attempt failed for {context}",
                retry_state.outcome.exception(),
                context={"attempt": retry_state.attempt_number, "operation": context},
            )

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_exponential(multiplier=1, max=60),
        retry=retry_if_exception_type((NetworkError, OSError)),
        before=announce_retry,
        after=report_failure,
        reraise=True,
    )
    return await retrying(operation)
