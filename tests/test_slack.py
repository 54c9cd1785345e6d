"""
Tests for Slack routing and placeholder messaging.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from slack_sdk.errors import SlackApiError

from askbot.slack import handlers
from askbot.slack.channel import PLACEHOLDER_TEXT, PlaceholderHandle, SlackChannel


class FakeApp:
    """Records the listeners Bolt would register."""

    def __init__(self):
        self.commands = {}
        self.events = {}

    def command(self, name):
        def register(func):
            self.commands[name] = func
            return func
        return register

    def event(self, name):
        def register(func):
            self.events[name] = func
            return func
        return register


@pytest.fixture
def responder():
    responder = MagicMock()
    handlers.register_handlers(FakeApp(), responder)
    yield responder
    handlers._responder = None


@pytest.fixture
def client():
    client = MagicMock()
    client.chat_postMessage = AsyncMock(return_value={"channel": "C1", "ts": "111.222"})
    client.chat_update = AsyncMock()
    return client


class TestRegistration:
    def test_listeners(self) -> None:
        app = FakeApp()
        handlers.register_handlers(app, MagicMock())
        try:
            assert set(app.commands) == {"/hello", "/ask"}
            assert set(app.events) == {"app_mention"}
        finally:
            handlers._responder = None


class TestStripMentions:
    @pytest.mark.parametrize("text, expected", [
        ("<@U123ABC> what is rig?", "what is rig?"),
        ("hey <@U1> and <@W2> there", "hey  and  there"),
        ("<@U123>", ""),
        ("no mention", "no mention"),
    ])
    def test_strip(self, text, expected) -> None:
        assert handlers.strip_mentions(text) == expected


class TestHello:
    def test_greeting_in_ack(self) -> None:
        ack = AsyncMock()
        asyncio.run(handlers._handle_hello(ack))
        ack.assert_awaited_once_with(response_type="in_channel", text=handlers.GREETING)


class TestAsk:
    def test_query_is_deferred(self, responder, client) -> None:
        ack = AsyncMock()
        command = {"channel_id": "C9", "text": "  price of BTC?  ", "user_id": "U1"}

        asyncio.run(handlers._handle_ask(ack, command, client))

        ack.assert_awaited_once_with()
        channel, query = responder.spawn.call_args.args
        assert isinstance(channel, SlackChannel)
        assert channel.channel_id == "C9"
        assert channel.thread_ts is None
        assert query == "price of BTC?"

    def test_empty_query_gets_usage(self, responder, client) -> None:
        ack = AsyncMock()
        asyncio.run(handlers._handle_ask(ack, {"channel_id": "C9", "text": "   "}, client))

        ack.assert_awaited_once()
        responder.spawn.assert_not_called()
        client.chat_postMessage.assert_awaited_once()
        assert client.chat_postMessage.call_args.kwargs["text"] == handlers.ASK_USAGE

    def test_usage_failure_is_logged(self, responder, client) -> None:
        client.chat_postMessage = AsyncMock(
            side_effect=SlackApiError("channel_not_found", {"ok": False, "error": "channel_not_found"})
        )
        asyncio.run(handlers._handle_ask(AsyncMock(), {"channel_id": "C9", "text": ""}, client))
        responder.spawn.assert_not_called()


class TestMention:
    def test_mention_is_answered_in_thread(self, responder, client) -> None:
        event = {"text": "<@UBOT> what is rig?", "channel": "C5", "ts": "100.1", "user": "U2"}

        asyncio.run(handlers._handle_mention(event, AsyncMock(), client))

        responder.spawn.assert_called_once()
        channel, query = responder.spawn.call_args.args
        assert query == "what is rig?"
        assert channel.channel_id == "C5"
        assert channel.thread_ts == "100.1"

    def test_existing_thread_is_kept(self, responder, client) -> None:
        event = {"text": "<@UBOT> more", "channel": "C5", "ts": "100.9", "thread_ts": "100.1"}
        asyncio.run(handlers._handle_mention(event, AsyncMock(), client))
        channel, _ = responder.spawn.call_args.args
        assert channel.thread_ts == "100.1"

    def test_bare_mention_gets_greeting(self, responder, client) -> None:
        say = AsyncMock()
        event = {"text": "<@UBOT>", "channel": "C5", "ts": "100.1"}

        asyncio.run(handlers._handle_mention(event, say, client))

        say.assert_awaited_once_with(text=handlers.GREETING, thread_ts="100.1")
        responder.spawn.assert_not_called()

    def test_bot_messages_ignored(self, responder, client) -> None:
        say = AsyncMock()
        event = {"text": "<@UBOT> hi", "bot_id": "B1", "channel": "C5", "ts": "1"}
        asyncio.run(handlers._handle_mention(event, say, client))
        say.assert_not_awaited()
        responder.spawn.assert_not_called()

    def test_not_ready(self, client) -> None:
        handlers._responder = None
        say = AsyncMock()
        event = {"text": "<@UBOT> hi", "channel": "C5", "ts": "1"}
        asyncio.run(handlers._handle_mention(event, say, client))
        assert "starting up" in say.call_args.kwargs["text"]


class TestSlackChannel:
    def test_ack_posts_placeholder(self, client) -> None:
        channel = SlackChannel(client, "C1", thread_ts="9.9")
        handle = asyncio.run(channel.send_ack())

        assert handle == PlaceholderHandle(channel="C1", ts="111.222")
        client.chat_postMessage.assert_awaited_once_with(
            channel="C1", text=PLACEHOLDER_TEXT, thread_ts="9.9"
        )

    def test_edit_updates_placeholder(self, client) -> None:
        channel = SlackChannel(client, "C1")
        asyncio.run(channel.edit(PlaceholderHandle("C1", "111.222"), "done"))
        client.chat_update.assert_awaited_once_with(channel="C1", ts="111.222", text="done")
