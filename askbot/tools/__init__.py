"""
Tools System
============

Tools are the external capabilities the model can call while answering:
live market data from Hyperliquid and artwork search. Each tool has:

- a unique name
- a description the model reads to decide when to call it
- a parameter schema (a pydantic model, exported as JSON Schema)
- an async ``invoke`` that does the work and returns text for the model

How a tool call flows:
1. The model asks for ``search_hyperliquid_perp`` with ``{"symbol": "BTC"}``
2. ``ToolRegistry.dispatch`` looks the tool up by name
3. The tool decodes the raw arguments against its own schema
4. The tool runs and its text output goes back to the model

The set of tools is fixed and registered once at startup
(``build_registry``); after that the registry is only read.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from askbot.errors import SchemaError, ToolNotFoundError
from askbot.utils.logger import Logger

logger = Logger("Tools")

ArgsT = TypeVar("ArgsT", bound=BaseModel)


@dataclass(frozen=True)
class ToolDefinition:
    """
    What the model is told about a tool.

    Attributes:
        name: Unique identifier for the tool
        description: What the tool does (shown to the model)
        parameters: JSON Schema for the arguments
    """
    name: str
    description: str
    parameters: dict

    def to_openai_function(self) -> dict:
        """Convert to OpenAI's function-calling format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters
            }
        }


class Tool(ABC, Generic[ArgsT]):
    """
    Base class for every tool.

    Subclasses set ``name``, ``description`` and ``args_model`` and
    implement ``invoke``:

        class EchoArgs(BaseModel):
            text: str

        class EchoTool(Tool[EchoArgs]):
            name = "echo"
            description = "Repeat the text back"
            args_model = EchoArgs

            async def invoke(self, args: EchoArgs) -> str:
                return args.text
    """

    name: str
    description: str
    args_model: type[ArgsT]

    def definition(self) -> ToolDefinition:
        schema = self.args_model.model_json_schema()
        schema.pop("title", None)
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameters=schema
        )

    def decode(self, raw_args: Any) -> ArgsT:
        """
        Validate raw arguments against this tool's schema.

        Args:
            raw_args: A dict, or the JSON string the model produced

        Raises:
            SchemaError: If the arguments don't match the schema
        """
        try:
            if isinstance(raw_args, (str, bytes)):
                return self.args_model.model_validate_json(raw_args)
            if raw_args is None:
                raw_args = {}
            return self.args_model.model_validate(raw_args)
        except ValidationError as e:
            errors = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
                for err in e.errors()
            )
            raise SchemaError(self.name, errors) from e

    @abstractmethod
    async def invoke(self, args: ArgsT) -> str:
        """Run the tool with decoded arguments and return text for the model."""


class ToolRegistry:
    """
    Name-keyed registry of the available tools.

    Example:
        registry = ToolRegistry()
        registry.register(HyperliquidPerpSearchTool(resolver))

        output = await registry.dispatch("search_hyperliquid_perp", '{"symbol": "BTC"}')
        functions = registry.openai_tools()
    """

    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If a tool with this name already exists
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def definitions(self) -> list[ToolDefinition]:
        return [tool.definition() for tool in self._tools.values()]

    def openai_tools(self) -> list[dict]:
        """All tool definitions in OpenAI function format."""
        return [definition.to_openai_function() for definition in self.definitions()]

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    async def dispatch(self, name: str, raw_args: Any) -> str:
        """
        Decode arguments and run a tool by name.

        Args:
            name: The tool name the model asked for
            raw_args: Raw arguments (dict or JSON string)

        Returns:
            The tool's text output

        Raises:
            ToolNotFoundError: No tool has this name; nothing is invoked
            SchemaError: The arguments failed the tool's schema
            ToolError: Any failure raised by the tool itself
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)

        args = tool.decode(raw_args)

        logger.info(f"Executing tool: {name}")
        return await tool.invoke(args)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


def build_registry(market_data, art=None) -> ToolRegistry:
    """
    Create the registry with the bot's static tool set.

    Args:
        market_data: MarketDataResolver shared by the Hyperliquid tools
        art: Optional ArtSearchClient; the art tool is skipped without it

    Returns:
        A populated registry
    """
    from askbot.tools.art_tools import ArtSearchTool
    from askbot.tools.hyperliquid_tools import (
        HyperliquidPerpSearchTool,
        HyperliquidSpotSearchTool,
    )

    registry = ToolRegistry()
    registry.register(HyperliquidSpotSearchTool(market_data))
    registry.register(HyperliquidPerpSearchTool(market_data))
    if art is not None:
        registry.register(ArtSearchTool(art))

    logger.info(f"Registered {len(registry)} tools: {', '.join(registry.list_names())}")
    return registry


__all__ = [
    "Tool",
    "ToolDefinition",
    "ToolRegistry",
    "build_registry",
]
