#!/usr/bin/env python3
"""
Main entry point for the Twitch IRC client
"""

import asyncio
import logging
import os
import sys

from twitch_irc.config import ClientConfig, ConfigError, load_config
from twitch_irc.errors import log_error, run_with_retries
from twitch_irc.irc import IRCMessage, IRCSession, TwitchIRCClient
from twitch_irc.logging_config import LoggerConfigurator
from twitch_irc.logs.logger import logger


def log_privmsg(session: IRCSession, message: IRCMessage) -> None:
    if message.command != "PRIVMSG" or not message.params:
        return
    logger.log_event(
        "chat",
        "privmsg",
        user=session.nickname,
        channel=message.params[0],
        author=message.nickname or "?",
        message=message.trailing or "",
    )


def build_client(config: ClientConfig) -> TwitchIRCClient:
    client = TwitchIRCClient(
        config.nickname,
        config.password,
        server=config.server,
        port=config.port,
        connect_timeout=config.connect_timeout,
        ping_interval=config.ping_interval,
        pong_timeout=config.pong_timeout,
    )
    client.register_callback(log_privmsg)
    return client


async def run_session(client: TwitchIRCClient, config: ClientConfig) -> None:
    session = await client.connect()
    for capability in config.capabilities:
        session.request_capability(capability)
    for channel in config.channels:
        session.join(channel)
    try:
        result = await client.run(session)
    finally:
        snapshot = client.health(session).get_health_snapshot()
        logger.log_event(
            "app",
            "health_snapshot",
            level=logging.DEBUG,
            user=session.nickname,
            healthy=snapshot["healthy"],
            reasons=", ".join(snapshot["reasons"]) or "none",
        )
    logger.log_event(
        "app",
        "session_result",
        user=session.nickname,
        result=type(result).__name__ if result else "shutdown",
    )
    if result is not None:
        raise result


async def main():
    """Main function"""
    logger.log_event("app", "start")
    try:
        config = load_config(os.environ.get("TWITCH_IRC_CONF_FILE"))
    except ConfigError as e:
        logger.log_event("app", "config_invalid", level=logging.ERROR, error=str(e))
        sys.exit(1)
    client = build_client(config)
    logger.log_event("app", "config_loaded", nickname=client.nickname)
    try:
        await run_with_retries(
            lambda: run_session(client, config),
            context=f"session for {client.nickname}",
            max_attempts=config.max_attempts,
        )
    finally:
        logger.log_event("app", "shutdown")


if __name__ == "__main__":
    LoggerConfigurator().configure()
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logging.info("Application terminated by user")
        sys.exit(0)
    except Exception as e:
        log_error("Top-level error", e)
        logging.critical(f"Critical error occurred: {e}", exc_info=True)
        sys.exit(1)
