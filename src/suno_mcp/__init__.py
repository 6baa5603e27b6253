"""MCP server that generates songs through the Suno task API."""

__version__ = "0.1.0"
