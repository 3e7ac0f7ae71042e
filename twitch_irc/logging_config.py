"""
Logging setup for the Twitch IRC client.

Library modules only emit records. The entry point calls
``LoggerConfigurator.configure`` to attach a colorlog stderr handler.
Errors reported through ``log_structured_error`` are also counted per
category so a summary can be printed when the process exits.
"""

import atexit
import logging
import os
import sys
import threading
import time
from collections import deque
from typing import Any

import colorlog

LOG_FORMAT = (
    "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s"
)

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}

ERROR_LOGGER_NAME = "twitch_irc.errors"


def debug_enabled() -> bool:
    return os.environ.get("DEBUG", "").lower() in ("true", "1", "yes")


class ErrorAggregator:
    """Counts errors per category (network, parsing, callback, ...).

    Only the newest ``MAX_ENTRIES_PER_TYPE`` entries of a category are kept
    for the one hour window and the "last occurrence" field.
    """

    MAX_ENTRIES_PER_TYPE = 1000
    WINDOW_SECONDS = 3600

    def __init__(self):
        self._lock = threading.Lock()
        self._categories: dict[str, deque] = {}
        self.start_time = time.time()

    def record_error(
        self, error_type: str, message: str, context: dict[str, Any] | None = None
    ) -> None:
        entry = {"timestamp": time.time(), "message": message, "context": context or {}}
        with self._lock:
            entries = self._categories.get(error_type)
            if entries is None:
                entries = self._categories[error_type] = deque(
                    maxlen=self.MAX_ENTRIES_PER_TYPE
                )
            entries.append(entry)

    def get_error_summary(self) -> dict[str, Any]:
        now = time.time()
        hours = max((now - self.start_time) / 3600, 1)
        with self._lock:
            return {
                name: {
                    "total_count": len(entries),
                    "recent_count": sum(
                        1 for e in entries if now - e["timestamp"] < self.WINDOW_SECONDS
                    ),
                    "rate_per_hour": len(entries) / hours,
                    "last_occurrence": entries[-1] if entries else None,
                }
                for name, entries in self._categories.items()
            }

    def reset(self) -> None:
        with self._lock:
            self._categories.clear()
            self.start_time = time.time()

    def log_summary_report(self) -> None:
        summary = self.get_error_summary()
        report = logging.getLogger(ERROR_LOGGER_NAME)
        if not summary:
            report.info("No IRC errors recorded")
            return
        report.warning("IRC error summary (%d categories)", len(summary))
        for name, stats in sorted(summary.items()):
            last = stats["last_occurrence"]
            report.warning(
                "  %-10s total=%d last_hour=%d rate=%.1f/h last=%s",
                name,
                stats["total_count"],
                stats["recent_count"],
                stats["rate_per_hour"],
                last["message"] if last else "-",
            )


error_aggregator = ErrorAggregator()


def log_structured_error(
    error_type: str,
    message: str,
    exception: BaseException | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log ``[CATEGORY] message | Exception: ... | Context: k=v`` and count it.

    Args:
        error_type: Category such as 'network', 'parsing' or 'callback'.
        message: What failed.
        exception: The exception that was caught, if any.
        context: Extra key/value pairs appended to the line.
        level: Logging level, ERROR unless told otherwise.
    """
    parts = [f"[{error_type.upper()}] {message}"]
    if exception is not None:
        parts.append(f"Exception: {type(exception).__name__}: {exception}")
    if context:
        parts.append("Context: " + " | ".join(f"{k}={v}" for k, v in context.items()))
    logging.getLogger(ERROR_LOGGER_NAME).log(level, " | ".join(parts))
    error_aggregator.record_error(error_type, message, context)


def build_formatter() -> colorlog.ColoredFormatter:
    return colorlog.ColoredFormatter(
        LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors=LOG_COLORS,
        secondary_log_colors={"message": {"ERROR": "red", "CRITICAL": "magenta"}},
        reset=True,
    )


class LoggerConfigurator:
    """Installs the colored stderr handler on the root logger.

    The level is DEBUG when the ``DEBUG`` environment variable is truthy
    ('true', '1' or 'yes') and INFO otherwise.
    """

    def __init__(self, stream=None):
        self.stream = stream or sys.stderr

    def configure(self) -> int:
        level = logging.DEBUG if debug_enabled() else logging.INFO
        handler = logging.StreamHandler(self.stream)
        handler.setFormatter(build_formatter())

        root = logging.getLogger()
        for existing in list(root.handlers):
            root.removeHandler(existing)
        root.addHandler(handler)
        root.setLevel(level)

        atexit.register(self._report_errors_at_exit)
        return level

    @staticmethod
    def _report_errors_at_exit() -> None:
        error_aggregator.log_summary_report()
