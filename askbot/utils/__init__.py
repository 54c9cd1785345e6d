"""
Utilities Module
================

Shared helpers:
- logger: context-aware logging with a shared minimum level
- config: environment-driven configuration
"""

from askbot.utils.logger import Logger, set_default_level
from askbot.utils.config import get_config, Config

__all__ = ["Logger", "set_default_level", "get_config", "Config"]
