import pytest

from twitch_irc.errors import ParseError
from twitch_irc.irc import commands
from twitch_irc.irc.message import (
    IRCMessage,
    IRCPrefix,
    parse_irc_message,
    serialize_irc_message,
)


def test_parse_full_privmsg_with_tags_and_prefix():
    line = (
        "@badge-info=;color=#1E90FF;display-name=Viewer "
        ":viewer!viewer@viewer.tmi.twitch.tv PRIVMSG #chan :hello there friend\r\n"
    )
    msg = parse_irc_message(line)
    assert msg.tags == {"badge-info": "", "color": "#1E90FF", "display-name": "Viewer"}
    assert msg.prefix == IRCPrefix("viewer", "viewer", "viewer.tmi.twitch.tv")
    assert msg.command == "PRIVMSG"
    assert msg.params == ["#chan"]
    assert msg.trailing == "hello there friend"
    assert msg.raw == line


def test_no_tags_segment_means_tags_absent():
    msg = parse_irc_message(":tmi.twitch.tv 001 tester :Welcome, GLHF!\r\n")
    assert msg.tags is None


def test_malformed_tag_pair_is_dropped():
    msg = parse_irc_message("@good=1;flag;a=b=c;also=2 PING :x\r\n")
    assert msg.tags == {"good": "1", "also": "2"}
    assert msg.command == "PING"
    assert msg.trailing == "x"


def test_no_prefix_segment_means_prefix_absent():
    msg = parse_irc_message("PING :tmi.twitch.tv\r\n")
    assert msg.prefix is None
    assert msg.command == "PING"
    assert msg.params == []
    assert msg.trailing == "tmi.twitch.tv"


def test_prefix_without_bang_has_no_username():
    msg = parse_irc_message(":tmi.twitch.tv 376 tester :>\r\n")
    assert msg.prefix == IRCPrefix("tmi.twitch.tv")
    assert msg.prefix.username is None
    assert msg.prefix.hostname is None
    assert msg.nickname == "tmi.twitch.tv"


def test_prefix_without_at_has_no_hostname():
    msg = parse_irc_message(":nick!user JOIN #chan\r\n")
    assert msg.prefix == IRCPrefix("nick", "user", None)


def test_command_only_line_requires_terminator():
    with pytest.raises(ParseError):
        parse_irc_message("RECONNECT")


def test_command_only_line_with_terminator():
    msg = parse_irc_message("RECONNECT\r\n")
    assert msg.command == "RECONNECT"
    assert msg.params == []
    assert msg.trailing is None


def test_missing_terminator_with_params_is_error():
    with pytest.raises(ParseError):
        parse_irc_message("PING :tmi.twitch.tv")


@pytest.mark.parametrize("line", ["\r\n", " PING\r\n", "@a=b\r\n", ":prefix.only\r\n"])
def test_empty_command_is_error(line):
    with pytest.raises(ParseError):
        parse_irc_message(line)


def test_middle_params_without_trailing():
    msg = parse_irc_message(":nick!nick@nick.tmi.twitch.tv JOIN #chan\r\n")
    assert msg.params == ["#chan"]
    assert msg.trailing is None


def test_multiple_middle_params_and_trailing_with_colons():
    msg = parse_irc_message(":tmi.twitch.tv CAP * ACK :twitch.tv/tags twitch.tv/commands\r\n")
    assert msg.params == ["*", "ACK"]
    assert msg.trailing == "twitch.tv/tags twitch.tv/commands"

    msg = parse_irc_message("PRIVMSG #chan :see https://example.com :)\r\n")
    assert msg.trailing == "see https://example.com :)"


def test_colon_inside_param_stays_in_param():
    # Only a colon opening a token starts the trailing argument; a middle
    # parameter therefore can never begin with ':'.
    msg = parse_irc_message("CMD a:b c :rest\r\n")
    assert msg.params == ["a:b", "c"]
    assert msg.trailing == "rest"


def test_empty_trailing_is_present():
    msg = parse_irc_message("PRIVMSG #chan :\r\n")
    assert msg.trailing == ""


def test_serialize_in_wire_order():
    msg = IRCMessage(
        command="PRIVMSG",
        params=["#chan"],
        trailing="hi all",
        tags={"reply-parent-msg-id": "abc"},
        prefix=IRCPrefix("nick", "user", "host"),
    )
    assert (
        serialize_irc_message(msg)
        == "@reply-parent-msg-id=abc :nick!user@host PRIVMSG #chan :hi all\r\n"
    )


def test_serialize_pong_matches_wire_format():
    assert commands.pong("tmi.twitch.tv").serialize() == "PONG :tmi.twitch.tv\r\n"


def test_serialize_bare_command():
    assert IRCMessage(command="RECONNECT").serialize() == "RECONNECT\r\n"


def test_builder_messages_survive_serialize_then_parse():
    built = [
        commands.pass_("oauth:abc123"),
        commands.nick("tester"),
        commands.join("#SomeChannel"),
        commands.part("somechannel"),
        commands.privmsg("somechannel", "hello there: friend"),
        commands.ping(),
        commands.pong("payload"),
        commands.cap_req(commands.CAPABILITY_TAGS),
        IRCMessage(
            command="PRIVMSG",
            params=["#chan"],
            trailing="tagged",
            tags={"client-nonce": "n1"},
            prefix=IRCPrefix("nick", None, "host"),
        ),
    ]
    for msg in built:
        assert parse_irc_message(msg.serialize()) == msg


def test_raw_is_ignored_in_equality():
    parsed = parse_irc_message("PING :x\r\n")
    assert parsed == IRCMessage(command="PING", trailing="x")


def test_payload_prefers_trailing():
    assert parse_irc_message("PING :abc\r\n").payload == "abc"
    assert parse_irc_message("PING abc\r\n").payload == "abc"
    assert parse_irc_message("PING\r\n").payload is None


def test_prefix_with_host_but_no_username():
    msg = parse_irc_message(":nick@host.example PRIVMSG #chan :hi\r\n")
    assert msg.prefix == IRCPrefix("nick", None, "host.example")
    assert serialize_irc_message(msg) == ":nick@host.example PRIVMSG #chan :hi\r\n"


def test_prefix_with_username_and_host():
    msg = parse_irc_message(":nick!user@host.example JOIN #chan\r\n")
    assert msg.prefix == IRCPrefix("nick", "user", "host.example")
