"""
Deferred Responses
==================

Chat platforms give a bot a few seconds to acknowledge a request, but an
agent prompt (embedding, model calls, tool calls) can take much longer.
The DeferredResponder splits the work:

    1. send_ack()      post a placeholder ("Thinking...") right away
    2. agent.prompt()  do the slow work
    3. edit()          replace the placeholder with the answer or an error

The acknowledgement always comes first. If it can't be sent the request
is dropped (logged, nothing else runs). If the final edit fails, for
example because the channel went away, that is logged and dropped too.
Nothing here raises to the caller.
"""

import asyncio
from typing import Any, Protocol

from askbot.agent.core import Agent, Query
from askbot.errors import AskbotError, ToolLoopExceeded
from askbot.utils.logger import Logger

logger = Logger("Deferred")

GENERIC_ERROR = "Sorry, I encountered an error processing your request."


class Channel(Protocol):
    """A place to acknowledge and later answer one request."""

    async def send_ack(self) -> Any:
        """Post the placeholder and return a handle for editing it."""

    async def edit(self, handle: Any, text: str) -> None:
        """Replace the placeholder's text."""

    async def send_error(self, text: str) -> None:
        """Post a standalone error message."""


def format_error(error: BaseException) -> str:
    """Render a failed prompt as a user-facing message."""
    if isinstance(error, ToolLoopExceeded):
        return (
            "Sorry, I couldn't finish answering: I needed more than "
            f"{error.limit} tool calls. Try a more specific question."
        )
    if isinstance(error, AskbotError):
        return f"Error processing request: {error.message}"
    return GENERIC_ERROR


class DeferredResponder:
    """
    Acknowledge-then-edit wrapper around the agent.

    Example:
        responder = DeferredResponder(agent)
        await responder.handle(SlackChannel(client, "C123"), "what is rig?")
    """

    def __init__(self, agent: Agent):
        self.agent = agent
        self._tasks: set[asyncio.Task] = set()

    async def handle(self, channel: Channel, query: Query | str) -> bool:
        """
        Run one deferred request.

        Returns:
            True if the placeholder was acknowledged and then edited
        """
        if isinstance(query, str):
            query = Query(query)

        try:
            handle = await channel.send_ack()
        except Exception as e:
            logger.error("Failed to send acknowledgement, dropping request", e)
            return False

        try:
            response = await self.agent.prompt(query)
            text = response.text
        except Exception as e:
            logger.error("Error processing request", e)
            text = format_error(e)

        try:
            await channel.edit(handle, text)
        except Exception as e:
            logger.error("Failed to edit placeholder, dropping response", e)
            return False

        return True

    def spawn(self, channel: Channel, query: Query | str) -> asyncio.Task:
        """
        Schedule ``handle`` in the background and return immediately.

        The task is referenced until it finishes so it isn't garbage
        collected mid-flight.
        """
        task = asyncio.create_task(self.handle(channel, query))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every spawned request to finish (used on shutdown)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))
