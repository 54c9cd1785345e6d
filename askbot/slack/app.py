"""
Slack Bolt App
==============

Creates the Bolt application and its Socket Mode connection.

Socket Mode keeps a WebSocket open to Slack, so the bot needs no public
URL; events and slash commands arrive over that socket.
"""

from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_bolt.async_app import AsyncApp

from askbot.utils.config import SlackConfig
from askbot.utils.logger import Logger

logger = Logger("SlackApp")


def create_slack_app(config: SlackConfig) -> AsyncApp:
    """Create the Bolt app with the bot token and signing secret."""
    app = AsyncApp(
        token=config.bot_token,
        signing_secret=config.signing_secret,
    )

    logger.info("Slack Bolt app created")
    return app


async def create_socket_handler(app: AsyncApp, config: SlackConfig) -> AsyncSocketModeHandler:
    """Create the Socket Mode handler using the app-level token."""
    handler = AsyncSocketModeHandler(
        app=app,
        app_token=config.app_token
    )

    logger.info("Socket Mode handler created")
    return handler
