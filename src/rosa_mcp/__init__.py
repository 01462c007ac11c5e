"""ROSA MCP server: OCM cluster management tools for AI agents."""

__version__ = "0.1.0"
