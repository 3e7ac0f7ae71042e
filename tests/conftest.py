import asyncio

import pytest
import pytest_asyncio

from tests.fixtures.irc_fixtures import FakeTransport
from twitch_irc.irc import DEFAULT_CALLBACKS, IRCSession, TwitchIRCClient


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def session(transport: FakeTransport) -> IRCSession:
    return IRCSession(
        transport,  # type: ignore[arg-type]
        nickname="tester",
        password="oauth:secret",
        callbacks=list(DEFAULT_CALLBACKS),
    )


@pytest.fixture
def client() -> TwitchIRCClient:
    return TwitchIRCClient("Tester", "oauth:secret", shutdown_timeout=1.0)


@pytest_asyncio.fixture
async def running(client: TwitchIRCClient, session: IRCSession):
    """Start ``client.run(session)`` in the background and stop it afterwards."""
    session.callbacks = client.callbacks
    session.send_login()
    task = asyncio.create_task(client.run(session))
    yield task
    if not task.done():
        session.request_shutdown()
        await asyncio.wait_for(task, timeout=2.0)
