"""
Completion Model
================

Wraps OpenAI chat completions with function calling. One call returns
either the final answer text or the tool calls the model wants made.
"""

from dataclasses import dataclass, field

from openai import AsyncOpenAI, OpenAIError

from askbot.agent.tools_executor import ToolCall
from askbot.errors import ModelError
from askbot.utils.logger import Logger

logger = Logger("Model")


@dataclass(frozen=True)
class Completion:
    """
    One model turn.

    Attributes:
        text: Answer text (may be None when the model only calls tools)
        tool_calls: Tool calls requested in this turn
        message: The assistant message to append to the conversation
    """
    text: str | None
    tool_calls: list[ToolCall] = field(default_factory=list)
    message: dict = field(default_factory=dict)

    @property
    def wants_tools(self) -> bool:
        return bool(self.tool_calls)


class CompletionModel:
    """
    OpenAI chat completion client.

    Example:
        model = CompletionModel(api_key="sk-...", model="gpt-4o")
        completion = await model.complete(messages, tools=registry.openai_tools())
        if completion.wants_tools:
            ...
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o",
        client: AsyncOpenAI | None = None
    ):
        self.client = client if client is not None else AsyncOpenAI(api_key=api_key)
        self.model = model

        logger.info(f"Completion model initialized: {model}")

    async def complete(self, messages: list[dict], tools: list[dict] | None = None) -> Completion:
        """
        Run one completion.

        Args:
            messages: Conversation in OpenAI message format
            tools: Tool definitions in OpenAI function format

        Raises:
            ModelError: If the API call fails or returns no choices
        """
        kwargs: dict = {"model": self.model, "messages": messages}
        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = "auto"

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            raise ModelError(f"Completion request failed: {e}") from e

        if not response.choices:
            raise ModelError("Completion returned no choices")

        message = response.choices[0].message
        tool_calls = [
            ToolCall(
                id=tc.id,
                name=tc.function.name,
                arguments=tc.function.arguments or "{}"
            )
            for tc in (message.tool_calls or [])
        ]

        assistant_message: dict = {"role": "assistant", "content": message.content}
        if tool_calls:
            assistant_message["tool_calls"] = [
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {"name": tc.name, "arguments": tc.arguments}
                }
                for tc in tool_calls
            ]

        logger.debug(f"Completion: {len(tool_calls)} tool calls, {len(message.content or '')} chars")
        return Completion(text=message.content, tool_calls=tool_calls, message=assistant_message)
