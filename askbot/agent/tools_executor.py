"""
Tool Executor
=============

Runs the tool calls the model asks for and turns the outcomes into tool
messages for the next model turn.

Tool Execution Loop:
    1. Model responds with one or more tool calls
    2. Executor dispatches each call through the ToolRegistry, in order
    3. Each result (or its error, as text) becomes a "tool" message
    4. The model is called again with those messages appended

Tool failures are not fatal to the prompt: a missing tool, bad arguments
or an upstream error is reported back to the model as "Error: ..." so it
can explain the problem or try something else.
"""

from dataclasses import dataclass

from askbot.errors import ToolError
from askbot.tools import ToolRegistry
from askbot.utils.logger import Logger

logger = Logger("ToolExecutor")


@dataclass(frozen=True)
class ToolCall:
    """
    A tool call requested by the model.

    Attributes:
        id: The tool call ID (for matching results)
        name: The tool name
        arguments: Raw JSON arguments exactly as the model produced them
    """
    id: str
    name: str
    arguments: str


@dataclass(frozen=True)
class ToolCallResult:
    """
    Outcome of one tool call.

    Attributes:
        tool_call_id: The original tool call ID
        name: The tool name
        output: Tool output, or the error rendered as text
        success: False when the tool raised a ToolError
    """
    tool_call_id: str
    name: str
    output: str
    success: bool = True

    def to_openai_message(self) -> dict:
        return {
            "role": "tool",
            "tool_call_id": self.tool_call_id,
            "content": self.output
        }


class ToolExecutor:
    """
    Executes model tool calls against a registry.

    Example:
        executor = ToolExecutor(registry)
        results = await executor.execute_all(completion.tool_calls)
        messages.extend(r.to_openai_message() for r in results)
    """

    def __init__(self, registry: ToolRegistry):
        self.registry = registry

    async def execute_one(self, tool_call: ToolCall) -> ToolCallResult:
        logger.info(f"Executing tool: {tool_call.name}")
        logger.debug(f"Arguments for {tool_call.name}: {tool_call.arguments}")

        try:
            output = await self.registry.dispatch(tool_call.name, tool_call.arguments)
        except ToolError as e:
            logger.warning(f"Tool {tool_call.name} failed: {e}")
            return ToolCallResult(
                tool_call_id=tool_call.id,
                name=tool_call.name,
                output=f"Error: {e}",
                success=False
            )

        logger.debug(f"Tool {tool_call.name} succeeded ({len(output)} chars)")
        return ToolCallResult(
            tool_call_id=tool_call.id,
            name=tool_call.name,
            output=output
        )

    async def execute_all(self, tool_calls: list[ToolCall]) -> list[ToolCallResult]:
        """
        Execute tool calls one after another, in the order given.

        Calls within one model turn are not run concurrently; results come
        back in input order.
        """
        results = []
        for tool_call in tool_calls:
            results.append(await self.execute_one(tool_call))
        return results
