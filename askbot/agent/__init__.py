"""
Agent System
============

The agent answers a query by:
1. Retrieving relevant documents from the ContextStore
2. Calling the model with those documents and the tool definitions
3. Running any tools the model asks for and feeding results back
4. Returning the (length-capped) final answer

This module provides:
- Agent: the prompt loop
- ContextAssembler: builds the model input
- ToolExecutor: runs requested tool calls
- CompletionModel: OpenAI chat completions
- DeferredResponder: acknowledge-then-edit delivery for chat channels
"""

from askbot.agent.context import ContextAssembler
from askbot.agent.core import Agent, Query, Response, truncate_response
from askbot.agent.deferred import DeferredResponder, format_error
from askbot.agent.model import Completion, CompletionModel
from askbot.agent.tools_executor import ToolCall, ToolExecutor

__all__ = [
    "Agent",
    "Query",
    "Response",
    "truncate_response",
    "ContextAssembler",
    "Completion",
    "CompletionModel",
    "DeferredResponder",
    "format_error",
    "ToolCall",
    "ToolExecutor",
]
