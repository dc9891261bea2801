"""Consult-user MCP server: blocking dialogs that let an agent ask a human."""

__version__ = "1.0.0"
