"""
Agent Core
==========

Answers one query with retrieved context and tools.

Agent Loop:
    Query
      │
      ▼
    Retrieve top-K documents (ContextStore)
      │
      ▼
    Model call with preamble + documents + tool definitions
      │
      ▼
    ┌── Tool calls requested? ──┐
    │                           │
    Yes                         No
    │                           │
    ▼                           ▼
    Run tools in order     Truncate and return
    Append results
    │
    └── call the model again (at most max_tool_iterations rounds)

The agent is built once at startup and shared by every request. It keeps
no per-request state: each prompt is a fresh, single-turn conversation.
"""

from dataclasses import dataclass

from askbot.agent.context import ContextAssembler, DEFAULT_PREAMBLE
from askbot.agent.model import CompletionModel
from askbot.agent.tools_executor import ToolExecutor
from askbot.errors import ToolLoopExceeded
from askbot.rag import ContextStore
from askbot.tools import ToolRegistry
from askbot.utils.logger import Logger

logger = Logger("Agent")

TRUNCATION_MARKER = "\n\n_(response truncated)_"


@dataclass(frozen=True)
class Query:
    text: str


@dataclass(frozen=True)
class Response:
    text: str
    truncated: bool = False


def truncate_response(text: str, limit: int, marker: str = TRUNCATION_MARKER) -> Response:
    """
    Cap a reply at ``limit`` characters.

    Over-long text keeps exactly its first ``limit - len(marker)``
    characters followed by the marker, so the result is ``limit`` long.
    The cut ignores word boundaries.

    Raises:
        ValueError: If the limit cannot fit the marker
    """
    if limit <= len(marker):
        raise ValueError(f"Limit {limit} must be longer than the truncation marker")

    if len(text) <= limit:
        return Response(text=text, truncated=False)

    return Response(text=text[:limit - len(marker)] + marker, truncated=True)


class Agent:
    """
    Retrieval-augmented, tool-using question answering.

    Example:
        agent = Agent(store=store, registry=registry, model=model)

        response = await agent.prompt(Query("What is the BTC perp price?"))
        print(response.text)
    """

    def __init__(
        self,
        store: ContextStore,
        registry: ToolRegistry,
        model: CompletionModel,
        top_k: int = 2,
        max_tool_iterations: int = 5,
        max_response_chars: int = 3000,
        preamble: str = DEFAULT_PREAMBLE
    ):
        """
        Args:
            store: Document index for retrieved context
            registry: Tools the model may call
            model: Completion provider
            top_k: Documents injected into each prompt
            max_tool_iterations: Tool rounds allowed before giving up
            max_response_chars: Hard cap on the reply length
            preamble: System prompt
        """
        if max_tool_iterations < 1:
            raise ValueError("max_tool_iterations must be at least 1")

        self.store = store
        self.registry = registry
        self.model = model
        self.top_k = top_k
        self.max_tool_iterations = max_tool_iterations
        self.max_response_chars = max_response_chars

        self.context_assembler = ContextAssembler(preamble)
        self.tool_executor = ToolExecutor(registry)

        logger.info(
            f"Agent initialized ({len(store)} documents, {len(registry)} tools, "
            f"top_k={top_k}, max_tool_iterations={max_tool_iterations})"
        )

    async def prompt(self, query: Query) -> Response:
        """
        Answer a query.

        Raises:
            EmbeddingError: Retrieval failed
            ModelError: The completion call failed
            ToolLoopExceeded: The model kept calling tools past the limit
        """
        logger.info(f"Prompt: {query.text[:50]}...")

        documents = await self.store.query(query.text, self.top_k)
        logger.debug(f"Retrieved {len(documents)} documents")

        context = self.context_assembler.assemble(query.text, documents)
        messages = context.to_openai_messages()
        tools = self.registry.openai_tools()

        completion = await self.model.complete(messages, tools)

        iterations = 0
        while completion.wants_tools:
            if iterations >= self.max_tool_iterations:
                logger.warning(f"Reached max tool iterations ({self.max_tool_iterations})")
                raise ToolLoopExceeded(self.max_tool_iterations)

            iterations += 1
            names = ", ".join(tc.name for tc in completion.tool_calls)
            logger.debug(f"Tool round {iterations}: {names}")

            results = await self.tool_executor.execute_all(completion.tool_calls)

            messages.append(completion.message)
            messages.extend(result.to_openai_message() for result in results)

            completion = await self.model.complete(messages, tools)

        response = truncate_response(completion.text or "", self.max_response_chars)
        if response.truncated:
            logger.info(f"Response truncated to {self.max_response_chars} chars")

        logger.info(f"Generated response ({len(response.text)} chars, {iterations} tool rounds)")
        return response
