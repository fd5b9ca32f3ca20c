"""MCP adapter exposing browser automation tools (navigate, act, extract, observe)."""

__version__ = "0.1.0"
