"""Slack API payloads, an async client, the real-time socket loop and the events between them."""

__version__ = "0.1.0"