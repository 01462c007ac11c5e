"""Tool registry and dispatch for ROSA MCP."""

from rosa_mcp.tools.arguments import ArgumentBag
from rosa_mcp.tools.dispatch import ToolResult, invoke
from rosa_mcp.tools.registry import (
    DEFAULT_PROFILE,
    ParamType,
    Profile,
    ToolParameter,
    ToolRegistry,
    ToolSpec,
)

__all__ = [
    "DEFAULT_PROFILE",
    "ArgumentBag",
    "ParamType",
    "Profile",
    "ToolParameter",
    "ToolRegistry",
    "ToolResult",
    "ToolSpec",
    "invoke",
]
