"""
Askbot - Retrieval-Augmented Slack Assistant
============================================

A Slack bot that answers questions with an LLM grounded in a document
corpus and a small set of live-data tools.

This package provides:
- RAG context store over a markdown corpus
- Tool registry with Hyperliquid market data and artwork search
- Agent loop with bounded tool calling and length-capped replies
- Deferred (acknowledge-then-edit) delivery for Slack
"""

__version__ = "1.0.0"
