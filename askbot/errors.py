"""
Error Taxonomy
==============

Every failure the bot can report to a user is one of these exceptions.
None of them is fatal to the process: the Slack layer turns them into a
message in the channel (see ``askbot.agent.deferred.format_error``).

    AskbotError
    ├── AgentError
    │   ├── EmbeddingError         provider failed to embed text
    │   ├── ModelError             completion call failed
    │   └── ToolLoopExceeded       model kept calling tools past the limit
    └── ToolError
        ├── ToolNotFoundError      no tool registered under that name
        ├── SchemaError            tool arguments failed validation
        └── MarketDataError        (also used by other HTTP-backed tools)
            ├── TransportError     connection / network failure
            ├── UpstreamStatusError  non-2xx HTTP status
            ├── InvalidResponse    payload did not have the expected shape
            └── SymbolNotFound     lookup miss for the requested symbol
"""


class AskbotError(Exception):
    """Base class for all bot errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# ==============================================================================
# Agent errors
# ==============================================================================

class AgentError(AskbotError):
    """A prompt cycle could not produce an answer."""


class EmbeddingError(AgentError):
    """The embedding provider failed or returned unusable vectors."""


class ModelError(AgentError):
    """The completion provider failed."""


class ToolLoopExceeded(AgentError):
    """The model asked for more tool rounds than allowed."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"No final answer after {limit} tool iterations")


# ==============================================================================
# Tool errors
# ==============================================================================

class ToolError(AskbotError):
    """A tool could not be dispatched or failed while running."""


class ToolNotFoundError(ToolError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool '{name}' not found")


class SchemaError(ToolError):
    """Raw tool arguments did not match the tool's parameter schema."""

    def __init__(self, tool: str, detail: str) -> None:
        self.tool = tool
        self.detail = detail
        super().__init__(f"Invalid arguments for '{tool}': {detail}")


class MarketDataError(ToolError):
    """Base for failures talking to an external data API."""


class TransportError(MarketDataError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"HTTP request failed: {detail}")


class UpstreamStatusError(MarketDataError):
    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(f"API returned status: {status} - {body}")


class InvalidResponse(MarketDataError):
    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        message = "Invalid response structure"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class SymbolNotFound(MarketDataError):
    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(f"Symbol not found: {symbol}")
