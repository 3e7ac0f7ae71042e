import pytest

from twitch_irc.irc import commands


def test_channel_normalization():
    assert commands.normalize_channel("SomeChannel") == "#somechannel"
    assert commands.normalize_channel("##chan ") == "#chan"


def test_empty_channel_rejected():
    with pytest.raises(ValueError):
        commands.join("#")


def test_login_lines():
    assert commands.pass_("oauth:tok").serialize() == "PASS oauth:tok\r\n"
    assert commands.nick("tester").serialize() == "NICK tester\r\n"


def test_privmsg_line():
    line = commands.privmsg("#Chan", "hello world").serialize()
    assert line == "PRIVMSG #chan :hello world\r\n"


def test_ping_defaults_to_server_name():
    assert commands.ping().serialize() == "PING :tmi.twitch.tv\r\n"


def test_cap_req_line():
    line = commands.cap_req(commands.CAPABILITY_MEMBERSHIP).serialize()
    assert line == "CAP REQ :twitch.tv/membership\r\n"
