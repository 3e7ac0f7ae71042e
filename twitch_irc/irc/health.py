"""Session health snapshots."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from .models import SessionState

if TYPE_CHECKING:  # pragma: no cover
    from .session import IRCSession


class IRCHealthMonitor:
    def __init__(self, session: IRCSession, pong_stale_after: float | None = None) -> None:
        self.session = session
        self.pong_stale_after = pong_stale_after

    def is_healthy(self) -> bool:
        return bool(self.get_health_snapshot()["healthy"])

    def get_health_snapshot(self) -> dict[str, Any]:
        s = self.session
        reasons: list[str] = []
        current_time = time.time()
        if s.state != SessionState.READY:
            reasons.append(f"state_{s.state.name.lower()}")
        if s.transport.closed:
            reasons.append("connection_closed")
        time_since_pong = self._check_pong_health(reasons, current_time)
        return {
            "username": s.nickname,
            "state": s.state.name,
            "healthy": not reasons,
            "reasons": reasons,
            "login_sent": s.login_sent.is_set(),
            "ready": s.ready.is_set(),
            "uptime": current_time - s.created_at,
            "time_since_pong": time_since_pong,
            "outbound_pending": s.outbound.qsize(),
            "inbound_pending": s.inbound.qsize(),
            "gated_pending": s.gated.qsize(),
            "terminate_reason": s.terminate_reason,
        }

    def _check_pong_health(
        self, reasons: list[str], current_time: float
    ) -> float | None:
        last_pong = self.session.last_pong
        if last_pong is None:
            return None
        elapsed = current_time - last_pong
        if self.pong_stale_after is not None and elapsed > self.pong_stale_after:
            reasons.append("pong_stale")
        return elapsed


def get_health_snapshot(session: IRCSession) -> dict[str, Any]:
    return IRCHealthMonitor(session).get_health_snapshot()
