"""Shared utilities for ROSA MCP."""
