"""
Tests for the agent loop, context assembly and the completion model.
"""

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from askbot.agent import Agent, CompletionModel, ContextAssembler, Query, truncate_response
from askbot.agent.core import TRUNCATION_MARKER
from askbot.errors import EmbeddingError, ModelError, ToolLoopExceeded
from askbot.rag import ContextStore
from askbot.tools import ToolRegistry

from fakes import EchoTool, FakeEmbedder, ScriptedModel, text_completion, tool_completion


DOCS = {
    "Rig is a Rust library for LLM apps.": [1.0, 0.0],
    "Rig supports many providers.": [0.9, 0.1],
    "Bananas are yellow.": [0.0, 1.0],
}


def make_agent(completions, events=None, **kwargs):
    embedder = FakeEmbedder(dict(DOCS), default=[1.0, 0.0], events=events)
    store = asyncio.run(ContextStore.build(list(DOCS), embedder))
    registry = ToolRegistry()
    echo = EchoTool()
    registry.register(echo)
    model = ScriptedModel(completions, events=events)
    agent = Agent(store=store, registry=registry, model=model, **kwargs)
    return agent, model, echo


class TestPrompt:
    def test_plain_answer(self) -> None:
        agent, model, _ = make_agent([text_completion("Rig is a library.")])
        response = asyncio.run(agent.prompt(Query("what is rig?")))
        assert response.text == "Rig is a library."
        assert not response.truncated
        assert len(model.calls) == 1

    def test_top_documents_in_system_message(self) -> None:
        agent, model, _ = make_agent([text_completion("ok")], top_k=2)
        asyncio.run(agent.prompt(Query("what is rig?")))

        messages = model.calls[0]["messages"]
        assert messages[0]["role"] == "system"
        assert "Rig is a Rust library" in messages[0]["content"]
        assert "Rig supports many providers" in messages[0]["content"]
        assert "Bananas" not in messages[0]["content"]
        assert messages[1] == {"role": "user", "content": "what is rig?"}

    def test_tools_are_offered(self) -> None:
        agent, model, _ = make_agent([text_completion("ok")])
        asyncio.run(agent.prompt(Query("hi")))
        (tool,) = model.calls[0]["tools"]
        assert tool["function"]["name"] == "echo"

    def test_tool_round_then_answer(self) -> None:
        agent, model, echo = make_agent([
            tool_completion("echo", {"text": "ping"}),
            text_completion("The echo said ping."),
        ])
        response = asyncio.run(agent.prompt(Query("echo ping")))

        assert response.text == "The echo said ping."
        assert echo.invocations == ["ping"]
        assert len(model.calls) == 2

        second = model.calls[1]["messages"]
        assert second[-2]["role"] == "assistant"
        assert second[-2]["tool_calls"][0]["function"]["name"] == "echo"
        assert second[-1] == {"role": "tool", "tool_call_id": "call_1", "content": "echo: ping"}

    def test_tool_error_is_fed_back(self) -> None:
        agent, model, _ = make_agent([
            tool_completion("search_everything", {"q": "x"}),
            text_completion("I couldn't find that tool."),
        ])
        response = asyncio.run(agent.prompt(Query("find x")))

        assert response.text == "I couldn't find that tool."
        tool_message = model.calls[1]["messages"][-1]
        assert tool_message["role"] == "tool"
        assert tool_message["content"] == "Error: Tool 'search_everything' not found"

    def test_bad_tool_arguments_are_fed_back(self) -> None:
        agent, model, echo = make_agent([
            tool_completion("echo", "{not json"),
            text_completion("Sorry."),
        ])
        asyncio.run(agent.prompt(Query("echo")))
        assert echo.invocations == []
        assert model.calls[1]["messages"][-1]["content"].startswith("Error: Invalid arguments for 'echo'")

    @pytest.mark.parametrize("limit", [1, 3])
    def test_tool_loop_is_capped(self, limit) -> None:
        agent, model, echo = make_agent(
            [tool_completion("echo", {"text": "again"})],
            max_tool_iterations=limit,
        )
        with pytest.raises(ToolLoopExceeded) as exc_info:
            asyncio.run(agent.prompt(Query("loop forever")))

        assert exc_info.value.limit == limit
        assert len(model.calls) == limit + 1
        assert len(echo.invocations) == limit

    def test_invalid_iteration_limit(self) -> None:
        with pytest.raises(ValueError):
            make_agent([text_completion("x")], max_tool_iterations=0)

    def test_long_answer_is_truncated(self) -> None:
        agent, _, _ = make_agent([text_completion("x" * 5000)], max_response_chars=100)
        response = asyncio.run(agent.prompt(Query("long please")))
        assert response.truncated
        assert len(response.text) == 100
        assert response.text.endswith(TRUNCATION_MARKER)

    def test_missing_text_becomes_empty(self) -> None:
        agent, _, _ = make_agent([text_completion(None)])
        assert asyncio.run(agent.prompt(Query("?"))).text == ""

    def test_model_error_propagates(self) -> None:
        agent, _, _ = make_agent([ModelError("provider down")])
        with pytest.raises(ModelError):
            asyncio.run(agent.prompt(Query("hi")))

    def test_retrieval_error_propagates(self) -> None:
        embedder = FakeEmbedder(dict(DOCS))
        store = asyncio.run(ContextStore.build(list(DOCS), embedder))
        model = ScriptedModel([text_completion("never")])
        agent = Agent(store=store, registry=ToolRegistry(), model=model)
        with pytest.raises(EmbeddingError):
            asyncio.run(agent.prompt(Query("unknown text")))
        assert model.calls == []


class TestTruncateResponse:
    def test_short_text_unchanged(self) -> None:
        response = truncate_response("hello", 100)
        assert response.text == "hello"
        assert not response.truncated

    def test_exact_limit_unchanged(self) -> None:
        text = "a" * 100
        assert truncate_response(text, 100).text == text

    def test_keeps_prefix_and_marker(self) -> None:
        text = "".join(str(i % 10) for i in range(1000))
        response = truncate_response(text, 200, marker="...")
        assert response.text == text[:197] + "..."
        assert len(response.text) == 200

    def test_limit_must_fit_marker(self) -> None:
        with pytest.raises(ValueError):
            truncate_response("anything", 3, marker="...")


class TestContextAssembler:
    def test_no_documents_is_preamble_only(self) -> None:
        context = ContextAssembler("Be nice.").assemble("hi", [])
        assert context.system_message == "Be nice."
        assert context.to_openai_messages() == [
            {"role": "system", "content": "Be nice."},
            {"role": "user", "content": "hi"},
        ]


class TestCompletionModel:
    def _client(self, message=None, error=None, choices=True) -> MagicMock:
        client = MagicMock()
        if error is not None:
            client.chat.completions.create = AsyncMock(side_effect=error)
        else:
            response = SimpleNamespace(
                choices=[SimpleNamespace(message=message)] if choices else []
            )
            client.chat.completions.create = AsyncMock(return_value=response)
        return client

    def test_text_answer(self) -> None:
        client = self._client(SimpleNamespace(content="hello", tool_calls=None))
        model = CompletionModel(client=client, model="gpt-4o")

        completion = asyncio.run(model.complete([{"role": "user", "content": "hi"}]))

        assert completion.text == "hello"
        assert not completion.wants_tools
        assert completion.message == {"role": "assistant", "content": "hello"}
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert "tools" not in kwargs

    def test_tool_calls(self) -> None:
        tool_call = SimpleNamespace(
            id="call_9",
            function=SimpleNamespace(name="echo", arguments=json.dumps({"text": "a"})),
        )
        client = self._client(SimpleNamespace(content=None, tool_calls=[tool_call]))
        model = CompletionModel(client=client)
        tools = [{"type": "function", "function": {"name": "echo"}}]

        completion = asyncio.run(model.complete([], tools))

        assert completion.wants_tools
        assert completion.tool_calls[0].id == "call_9"
        assert completion.tool_calls[0].arguments == '{"text": "a"}'
        assert completion.message["tool_calls"][0]["function"]["name"] == "echo"
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["tools"] == tools
        assert kwargs["tool_choice"] == "auto"

    def test_api_error(self) -> None:
        error = openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com"))
        model = CompletionModel(client=self._client(error=error))
        with pytest.raises(ModelError):
            asyncio.run(model.complete([]))

    def test_no_choices(self) -> None:
        model = CompletionModel(client=self._client(choices=False))
        with pytest.raises(ModelError, match="no choices"):
            asyncio.run(model.complete([]))
