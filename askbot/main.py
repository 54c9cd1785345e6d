"""
Askbot - Main Entry Point
=========================

Startup order:
1. Load configuration
2. Load the document corpus and build the ContextStore
3. Build the tool registry
4. Create the agent and deferred responder
5. Register Slack handlers and start Socket Mode

Run with:
    python -m askbot.main

Or after installing:
    askbot
"""

import asyncio
import signal
import sys

from askbot.utils.config import get_config
from askbot.utils.logger import Logger, set_default_level

main_logger = Logger("Main")


async def main():
    """Initialize every component and run the bot until stopped."""
    main_logger.info("Starting askbot...")

    try:
        # 1. Configuration (fails fast on missing env vars)
        main_logger.info("Loading configuration...")
        config = get_config()
        set_default_level(config.log_level)

        # 2. Retrieval corpus
        main_logger.info("Building context store...")
        from askbot.rag import ContextStore, EmbeddingGenerator, load_documents
        embedder = EmbeddingGenerator(
            api_key=config.openai.api_key,
            model=config.openai.embedding_model
        )
        texts = load_documents(config.rag.documents_dir)
        store = await ContextStore.build(texts, embedder)

        # 3. Tools
        main_logger.info("Setting up tools...")
        from askbot.tools import build_registry
        from askbot.tools.art_tools import ArtSearchClient
        from askbot.tools.market_data import MarketDataResolver
        registry = build_registry(
            MarketDataResolver(
                api_url=config.tools.hyperliquid_api_url,
                timeout=config.tools.timeout_seconds
            ),
            art=ArtSearchClient(
                api_url=config.tools.art_api_url,
                timeout=config.tools.timeout_seconds
            )
        )

        # 4. Agent
        main_logger.info("Creating agent...")
        from askbot.agent import Agent, CompletionModel, DeferredResponder
        agent = Agent(
            store=store,
            registry=registry,
            model=CompletionModel(api_key=config.openai.api_key, model=config.openai.model),
            top_k=config.rag.top_k,
            max_tool_iterations=config.agent.max_tool_iterations,
            max_response_chars=config.agent.max_response_chars
        )
        responder = DeferredResponder(agent)

        # 5. Slack
        main_logger.info("Creating Slack app...")
        from askbot.slack import create_slack_app, create_socket_handler, register_handlers
        app = create_slack_app(config.slack)
        register_handlers(app, responder)

        main_logger.info("Starting Socket Mode connection...")
        handler = await create_socket_handler(app, config.slack)

        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, stop.set)

        await handler.connect_async()
        main_logger.info("askbot is running! Press Ctrl+C to stop.")

        await stop.wait()
        await _shutdown(handler, responder)

    except KeyboardInterrupt:
        main_logger.info("Received interrupt signal")
    except Exception as e:
        main_logger.error("Failed to start bot", e)
        sys.exit(1)


async def _shutdown(handler, responder):
    """Let in-flight answers finish, then close the socket."""
    main_logger.info("Shutting down...")

    await responder.drain()
    await handler.close_async()

    main_logger.info("Shutdown complete")


def run():
    """Console-script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
