"""
Configuration Management
========================

All environment variables the bot reads are declared, typed and defaulted
here. Nothing else in the package calls ``os.getenv`` for settings.

Required:
    SLACK_BOT_TOKEN, SLACK_APP_TOKEN, SLACK_SIGNING_SECRET, OPENAI_API_KEY

Optional (defaults in brackets):
    OPENAI_MODEL [gpt-4o]
    OPENAI_EMBEDDING_MODEL [text-embedding-3-small]
    DOCUMENTS_DIR [documents]        corpus of markdown files for RAG
    RAG_TOP_K [2]                    documents injected per prompt
    MAX_TOOL_ITERATIONS [5]          tool rounds before giving up
    MAX_RESPONSE_CHARS [3000]        hard cap on a chat reply
    HYPERLIQUID_API_URL [https://api.hyperliquid.xyz/info]
    ART_API_URL [https://api.artic.edu/api/v1/artworks]
    HTTP_TIMEOUT_SECONDS [10]
    LOG_LEVEL [info]

Usage:
    from askbot.utils.config import get_config

    config = get_config()
    print(config.openai.model)
    print(config.agent.max_response_chars)
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from askbot.utils.logger import Logger

logger = Logger("Config")


def _required(name: str) -> str:
    """
    Get a required environment variable.

    Raises:
        ValueError: If the variable is not set
    """
    value = os.getenv(name)
    if not value:
        raise ValueError(
            f"Missing required environment variable: {name}\n"
            f"Please ensure {name} is set in your .env file."
        )
    return value


def _optional(name: str, default: str) -> str:
    return os.getenv(name) or default


def _optional_int(name: str, default: int, minimum: int = 0) -> int:
    """
    Get an optional integer environment variable.

    Invalid or too-small values fall back to the default with a warning.
    """
    value = os.getenv(name)
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"{name} is not a valid integer, using default: {default}")
        return default
    if parsed < minimum:
        logger.warning(f"{name} must be >= {minimum}, using default: {default}")
        return default
    return parsed


def _optional_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"{name} is not a valid number, using default: {default}")
        return default


# ==============================================================================
# Configuration Dataclasses
# ==============================================================================

@dataclass(frozen=True)
class SlackConfig:
    """Slack API configuration."""
    bot_token: str       # xoxb-... token for Web API calls
    app_token: str       # xapp-... token for Socket Mode
    signing_secret: str  # For verifying Slack requests


@dataclass(frozen=True)
class OpenAIConfig:
    """OpenAI API configuration."""
    api_key: str
    model: str             # Chat completion model
    embedding_model: str   # Embedding model for the document corpus


@dataclass(frozen=True)
class RAGConfig:
    """Retrieval configuration."""
    documents_dir: Path  # Directory holding the corpus
    top_k: int           # Documents injected into each prompt


@dataclass(frozen=True)
class AgentConfig:
    """Agent loop limits."""
    max_tool_iterations: int
    max_response_chars: int  # Shared limit for every chat reply


@dataclass(frozen=True)
class ToolsConfig:
    """External data APIs used by the tools."""
    hyperliquid_api_url: str
    art_api_url: str
    timeout_seconds: float


@dataclass(frozen=True)
class Config:
    """
    Root configuration object.

        config = get_config()
        config.slack.bot_token
        config.rag.top_k
        config.tools.hyperliquid_api_url
    """
    slack: SlackConfig
    openai: OpenAIConfig
    rag: RAGConfig
    agent: AgentConfig
    tools: ToolsConfig
    log_level: str


def load_config() -> Config:
    """
    Load and validate all configuration from the environment.

    Loads a .env file first (searched up from the working directory), then
    reads every setting.

    Raises:
        ValueError: If required configuration is missing
    """
    load_dotenv()

    # Relative corpus paths are resolved against the project root
    project_root = Path(__file__).parent.parent.parent
    documents_dir = Path(_optional("DOCUMENTS_DIR", "documents"))
    if not documents_dir.is_absolute():
        documents_dir = project_root / documents_dir

    return Config(
        slack=SlackConfig(
            bot_token=_required("SLACK_BOT_TOKEN"),
            app_token=_required("SLACK_APP_TOKEN"),
            signing_secret=_required("SLACK_SIGNING_SECRET"),
        ),
        openai=OpenAIConfig(
            api_key=_required("OPENAI_API_KEY"),
            model=_optional("OPENAI_MODEL", "gpt-4o"),
            embedding_model=_optional("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small"),
        ),
        rag=RAGConfig(
            documents_dir=documents_dir,
            top_k=_optional_int("RAG_TOP_K", 2),
        ),
        agent=AgentConfig(
            max_tool_iterations=_optional_int("MAX_TOOL_ITERATIONS", 5, minimum=1),
            max_response_chars=_optional_int("MAX_RESPONSE_CHARS", 3000, minimum=100),
        ),
        tools=ToolsConfig(
            hyperliquid_api_url=_optional("HYPERLIQUID_API_URL", "https://api.hyperliquid.xyz/info"),
            art_api_url=_optional("ART_API_URL", "https://api.artic.edu/api/v1/artworks"),
            timeout_seconds=_optional_float("HTTP_TIMEOUT_SECONDS", 10.0),
        ),
        log_level=_optional("LOG_LEVEL", "info"),
    )


# ==============================================================================
# Singleton
# ==============================================================================

_config_instance: Config | None = None


def get_config() -> Config:
    """Get the process-wide configuration, loading it on first access."""
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None
