"""
Slack Integration
=================

- app.py: Bolt app and Socket Mode handler
- channel.py: placeholder-then-edit messaging for deferred answers
- handlers.py: /hello, /ask and @mention routing
"""

from askbot.slack.app import create_slack_app, create_socket_handler
from askbot.slack.channel import PlaceholderHandle, SlackChannel
from askbot.slack.handlers import register_handlers

__all__ = [
    "create_slack_app",
    "create_socket_handler",
    "PlaceholderHandle",
    "SlackChannel",
    "register_handlers",
]
