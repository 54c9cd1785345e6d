"""
Slack Event Handlers
====================

Routes Slack input to the agent.

Inputs:
- /hello           static greeting, answered directly in the ack
- /ask <query>     question for the agent, answered via a deferred response
- app_mention      "@bot <query>" in a channel, answered in the thread

Slack expects an acknowledgement within 3 seconds, so nothing slow runs
before ``ack()``. Agent work is handed to the DeferredResponder, which
posts a placeholder first and edits it when the answer is ready.
"""

import re
from typing import TYPE_CHECKING

from slack_bolt.async_app import AsyncAck, AsyncApp, AsyncSay
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from askbot.slack.channel import SlackChannel
from askbot.utils.logger import Logger

if TYPE_CHECKING:
    from askbot.agent import DeferredResponder

logger = Logger("Handlers")

GREETING = (
    "Hello! I'm your helpful assistant. Ask me about the docs, "
    "crypto prices on Hyperliquid, or artworks. Try `/ask <question>`."
)
ASK_USAGE = "Usage: `/ask <your question>`"

MENTION_PATTERN = re.compile(r"<@[A-Z0-9]+>")

# Set during registration
_responder: "DeferredResponder | None" = None


def register_handlers(app: AsyncApp, responder: "DeferredResponder") -> None:
    """
    Register the slash commands and mention handler.

    Args:
        app: The Bolt app instance
        responder: Deferred responder wrapping the shared agent
    """
    global _responder
    _responder = responder

    app.command("/hello")(_handle_hello)
    app.command("/ask")(_handle_ask)
    app.event("app_mention")(_handle_mention)

    logger.info("Registered Slack handlers")


def strip_mentions(text: str) -> str:
    """Remove user mentions like <@U123ABC> and surrounding whitespace."""
    return MENTION_PATTERN.sub("", text).strip()


async def _handle_hello(ack: AsyncAck) -> None:
    await ack(response_type="in_channel", text=GREETING)


async def _handle_ask(
    ack: AsyncAck,
    command: dict,
    client: AsyncWebClient
) -> None:
    """
    Handle /ask <query>.

    The slash command is acked immediately; the answer arrives as a
    placeholder message in the same channel that is edited when ready.
    """
    await ack()

    channel = SlackChannel(client, command.get("channel_id", ""))
    query = (command.get("text") or "").strip()

    if not query:
        try:
            await channel.send_error(ASK_USAGE)
        except SlackApiError as e:
            logger.error("Could not send usage message", e)
        return

    if _responder is None:
        logger.error("Responder not initialized")
        return

    logger.info(f"/ask from {command.get('user_id')}: {query[:50]}...")
    _responder.spawn(channel, query)


async def _handle_mention(
    event: dict,
    say: AsyncSay,
    client: AsyncWebClient
) -> None:
    """
    Handle @mentions of the bot.

    The mention is stripped and the rest of the message is the query.
    Each mention is answered exactly once, in its thread.
    """
    if event.get("bot_id"):
        return

    thread_ts = event.get("thread_ts") or event.get("ts")
    text = strip_mentions(event.get("text", ""))

    if not text:
        await say(text=GREETING, thread_ts=thread_ts)
        return

    if _responder is None:
        logger.error("Responder not initialized")
        await say(text="Sorry, I'm still starting up. Please try again in a moment.", thread_ts=thread_ts)
        return

    logger.info(f"Mention from {event.get('user')} in {event.get('channel')}: {text[:50]}...")
    channel = SlackChannel(client, event.get("channel", ""), thread_ts=thread_ts)
    _responder.spawn(channel, text)
