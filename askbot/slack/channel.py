"""
Slack Channel
=============

The Slack side of a deferred response: post a placeholder message, then
edit it in place once the answer is ready.

    ack  → chat.postMessage("Thinking...")  returns channel + ts
    edit → chat.update(channel, ts, text)
"""

from dataclasses import dataclass

from slack_sdk.web.async_client import AsyncWebClient

from askbot.utils.logger import Logger

logger = Logger("SlackChannel")

PLACEHOLDER_TEXT = "Thinking..."


@dataclass(frozen=True)
class PlaceholderHandle:
    """Identifies a posted placeholder message."""
    channel: str
    ts: str


class SlackChannel:
    """
    A Slack conversation (optionally a thread) that a request is answered in.

    Example:
        channel = SlackChannel(client, "C123", thread_ts="1700000000.000100")
        handle = await channel.send_ack()
        await channel.edit(handle, "Here is the answer")
    """

    def __init__(
        self,
        client: AsyncWebClient,
        channel_id: str,
        thread_ts: str | None = None
    ):
        self.client = client
        self.channel_id = channel_id
        self.thread_ts = thread_ts

    async def send_ack(self) -> PlaceholderHandle:
        """
        Post the placeholder.

        Raises:
            SlackApiError: If Slack rejects the message
        """
        response = await self.client.chat_postMessage(
            channel=self.channel_id,
            text=PLACEHOLDER_TEXT,
            thread_ts=self.thread_ts
        )
        handle = PlaceholderHandle(channel=response["channel"], ts=response["ts"])
        logger.debug(f"Placeholder posted in {handle.channel} at {handle.ts}")
        return handle

    async def edit(self, handle: PlaceholderHandle, text: str) -> None:
        """Replace the placeholder's text."""
        await self.client.chat_update(
            channel=handle.channel,
            ts=handle.ts,
            text=text
        )

    async def send_error(self, text: str) -> None:
        """Post a new message (used when there is no placeholder to edit)."""
        await self.client.chat_postMessage(
            channel=self.channel_id,
            text=text,
            thread_ts=self.thread_ts
        )
