import asyncio

import pytest

from twitch_irc.errors import SessionStateError
from twitch_irc.irc import IRCSession
from twitch_irc.irc.models import SessionState, can_transition


def test_initial_state(session):
    assert session.state == SessionState.CONNECTING
    assert not session.login_sent.is_set()
    assert not session.is_ready
    assert session.last_pong is None


def test_send_login_queues_pass_then_nick(session):
    session.send_login()
    assert session.state == SessionState.AUTHENTICATING
    assert session.login_sent.is_set()
    assert session.outbound.get_nowait() == b"PASS oauth:secret\r\n"
    assert session.outbound.get_nowait() == b"NICK tester\r\n"
    assert session.outbound.empty()


def test_mark_ready_only_from_authenticating(session):
    assert session.mark_ready() is False
    assert session.state == SessionState.CONNECTING
    assert not session.is_ready

    session.send_login()
    assert session.mark_ready() is True
    assert session.state == SessionState.READY
    assert session.is_ready
    assert session.mark_ready() is False
    assert session.is_ready


def test_mark_ready_after_termination_is_ignored(session):
    session.send_login()
    session.mark_terminating("read_error")
    assert session.mark_ready() is False
    assert not session.is_ready
    assert session.state == SessionState.TERMINATING


def test_illegal_transition_raises(session):
    with pytest.raises(SessionStateError):
        session._set_state(SessionState.READY)  # noqa: SLF001


def test_transition_table_has_no_skips():
    assert can_transition(SessionState.CONNECTING, SessionState.AUTHENTICATING)
    assert not can_transition(SessionState.CONNECTING, SessionState.READY)
    assert not can_transition(SessionState.READY, SessionState.AUTHENTICATING)
    assert not can_transition(SessionState.CONNECTING, SessionState.CLOSED)
    assert not can_transition(SessionState.CLOSED, SessionState.TERMINATING)


def test_mark_terminating_keeps_first_reason(session):
    session.send_login()
    session.mark_terminating("disconnect")
    session.mark_terminating("write_error")
    assert session.terminate_reason == "disconnect"


@pytest.mark.asyncio
async def test_close_is_idempotent(session, transport):
    session.send_login()
    assert await session.close() is True
    assert await session.close() is False
    assert session.state == SessionState.CLOSED
    assert transport.close_calls == 2
    assert transport.closed


def test_send_raw_does_not_touch_outbound_before_ready(session):
    session.send_raw("PRIVMSG #chan :early")
    session.join("chan")
    assert session.outbound.empty()
    assert session.gated.qsize() == 2


def test_send_privileged_bypasses_gate(session):
    session.send_privileged("PONG :tmi.twitch.tv")
    assert session.outbound.get_nowait() == b"PONG :tmi.twitch.tv\r\n"


@pytest.mark.asyncio
async def test_release_gated_waits_for_both_gates_then_keeps_order(session):
    session.send_raw("PRIVMSG #chan :one")
    session.privmsg("chan", "two")
    releaser = asyncio.create_task(session.release_gated())
    try:
        await asyncio.sleep(0.01)
        assert session.outbound.empty()

        session.send_login()
        await asyncio.sleep(0.01)
        # Only the privileged login lines so far.
        assert session.outbound.qsize() == 2

        session.mark_ready()
        session.send_raw("PRIVMSG #chan :three")
        await asyncio.sleep(0.01)
        lines = [session.outbound.get_nowait() for _ in range(session.outbound.qsize())]
        assert lines == [
            b"PASS oauth:secret\r\n",
            b"NICK tester\r\n",
            b"PRIVMSG #chan :one\r\n",
            b"PRIVMSG #chan :two\r\n",
            b"PRIVMSG #chan :three\r\n",
        ]
    finally:
        releaser.cancel()


@pytest.mark.asyncio
async def test_wait_ready_times_out(session):
    assert await session.wait_ready(timeout=0.01) is False
    session.send_login()
    session.mark_ready()
    assert await session.wait_ready(timeout=0.01) is True


def test_request_capability_is_gated(session):
    session.request_capability("twitch.tv/tags")
    assert session.gated.get_nowait() == b"CAP REQ :twitch.tv/tags\r\n"


def test_full_gated_queue_drops_line_and_reports_it(transport, monkeypatch):
    events = []
    from twitch_irc.logs.logger import logger as client_logger

    monkeypatch.setattr(
        client_logger,
        "log_event",
        lambda domain, action, **kw: events.append((action, kw.get("queue"))),
    )
    session = IRCSession(transport, nickname="tester", password="x", queue_size=1)
    assert session.send_raw("PRIVMSG #chan :first") is True
    assert session.send_raw("PRIVMSG #chan :second") is False
    assert session.join("chan") is False
    assert session.gated.qsize() == 1
    assert session.gated.get_nowait() == b"PRIVMSG #chan :first\r\n"
    assert events == [("queue_full", "gated"), ("queue_full", "gated")]


def test_full_outbound_queue_drops_privileged_line(transport):
    session = IRCSession(transport, nickname="tester", password="x", queue_size=1)
    assert session.send_privileged("PONG :tmi.twitch.tv") is True
    assert session.send_privileged("PONG :tmi.twitch.tv") is False
    assert session.outbound.qsize() == 1
