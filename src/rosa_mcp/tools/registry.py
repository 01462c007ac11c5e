"""Declarative tool registry.

Tools are declared once as :class:`ToolSpec` entries by the domain modules
and collected through a :class:`Profile`. The registry is built at startup
and is immutable afterwards; it exposes the tool list to the MCP layer and
hands each call to the dispatch shim.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from mcp.types import Tool as MCPTool

if TYPE_CHECKING:
    import httpx

    from rosa_mcp.auth import TransportContext
    from rosa_mcp.clients.ocm import OCMSession
    from rosa_mcp.config import RosaMCPConfig
    from rosa_mcp.tools.arguments import ArgumentBag
    from rosa_mcp.tools.dispatch import ToolResult

logger = logging.getLogger(__name__)

ToolHandler = Callable[["OCMSession", "ArgumentBag"], str]


class ParamType(str, Enum):
    """Primitive argument types a tool may declare."""

    STRING = "string"
    BOOLEAN = "boolean"
    STRING_ARRAY = "array"

    def matches(self, value: Any) -> bool:
        if self is ParamType.STRING:
            return isinstance(value, str)
        if self is ParamType.BOOLEAN:
            return isinstance(value, bool)
        return isinstance(value, list) and all(isinstance(item, str) for item in value)

    def json_schema(self) -> dict[str, Any]:
        if self is ParamType.STRING_ARRAY:
            return {"type": "array", "items": {"type": "string"}}
        return {"type": self.value}


@dataclass(frozen=True)
class ToolParameter:
    """One declared tool argument."""

    name: str
    type: ParamType
    description: str
    required: bool = False
    default: Any = None

    def json_schema(self) -> dict[str, Any]:
        schema = self.type.json_schema()
        schema["description"] = self.description
        if self.default is not None:
            schema["default"] = self.default
        return schema


@dataclass(frozen=True)
class ToolSpec:
    """A named tool: its argument schema and the business handler behind it.

    The handler receives an open OCM session and the validated arguments and
    returns the formatted response text. It may raise; the dispatch shim
    classifies every failure.
    """

    name: str
    description: str
    handler: ToolHandler
    parameters: tuple[ToolParameter, ...] = ()
    operation_label: str = ""

    @property
    def label(self) -> str:
        return self.operation_label or self.name

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {p.name: p.json_schema() for p in self.parameters},
            "required": [p.name for p in self.parameters if p.required],
        }

    def to_mcp_tool(self) -> MCPTool:
        return MCPTool(name=self.name, description=self.description, inputSchema=self.input_schema)


@dataclass(frozen=True)
class Profile:
    """A named set of tools to expose.

    ``tools=None`` selects every defined tool.
    """

    name: str
    description: str
    tools: frozenset[str] | None = field(default=None)

    def select(self, specs: list[ToolSpec]) -> list[ToolSpec]:
        if self.tools is None:
            return list(specs)
        return [spec for spec in specs if spec.name in self.tools]


DEFAULT_PROFILE = Profile(
    name="default",
    description="Default profile with all ROSA HCP tools enabled",
)


def get_all_tool_specs() -> list[ToolSpec]:
    """Collect the tool specs declared by every domain module."""
    from rosa_mcp.domains.accounts.tools import get_tool_specs as account_tools
    from rosa_mcp.domains.clusters.tools import get_tool_specs as cluster_tools
    from rosa_mcp.domains.identity_providers.tools import get_tool_specs as idp_tools

    return [*account_tools(), *cluster_tools(), *idp_tools()]


class ToolRegistry:
    """Immutable mapping from tool name to :class:`ToolSpec`."""

    def __init__(
        self,
        config: RosaMCPConfig,
        specs: list[ToolSpec] | None = None,
        profile: Profile = DEFAULT_PROFILE,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        selected = profile.select(specs if specs is not None else get_all_tool_specs())

        tools: dict[str, ToolSpec] = {}
        for spec in selected:
            if spec.name in tools:
                raise ValueError(f"Duplicate tool name: {spec.name}")
            tools[spec.name] = spec

        self._config = config
        self._profile = profile
        self._tools: Mapping[str, ToolSpec] = MappingProxyType(tools)
        self._http_transport = http_transport
        logger.info(f"Loaded {len(tools)} tools from profile '{profile.name}'")

    @property
    def profile(self) -> Profile:
        return self._profile

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def list(self) -> list[ToolSpec]:
        return list(self._tools.values())

    def get(self, name: str) -> ToolSpec:
        """Look up a tool by name.

        Raises:
            KeyError: If no such tool is registered.
        """
        return self._tools[name]

    def dispatch(
        self,
        name: str,
        context: TransportContext,
        arguments: Mapping[str, Any] | None,
    ) -> ToolResult:
        """Run the named tool for one call.

        Raises:
            KeyError: If the name is unknown. The MCP layer validates names first.
        """
        from rosa_mcp.tools.dispatch import invoke

        spec = self._tools[name]
        return invoke(spec, context, arguments, self._config, http_transport=self._http_transport)
