"""FastMCP server definition for ROSA MCP."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

import anyio
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import CallToolResult
from mcp.types import Tool as MCPTool
from starlette.responses import JSONResponse

from rosa_mcp import __version__
from rosa_mcp.auth import TransportContext
from rosa_mcp.config import RosaMCPConfig, TransportMode, get_config
from rosa_mcp.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from starlette.requests import Request

logger = logging.getLogger(__name__)

SERVER_NAME = "rosa-mcp-server"

INSTRUCTIONS = (
    "MCP server for ROSA HCP (Red Hat OpenShift Service on AWS with hosted control "
    "planes) - enables AI agents to inspect the authenticated OCM account, list and "
    "describe clusters, provision ROSA HCP clusters, and configure htpasswd identity "
    "providers. Errors starting with AUTHENTICATION_FAILED: mean the OCM token is "
    "expired or invalid."
)


class RosaFastMCP(FastMCP):
    """FastMCP server whose tools come from a :class:`ToolRegistry`.

    Tool listing and invocation are answered from the registry instead of
    FastMCP's decorator-based tool manager; prompts and custom routes work as
    usual.
    """

    def __init__(self, registry: ToolRegistry, transport: TransportMode, **kwargs: Any) -> None:
        self._registry = registry
        self._transport = transport
        super().__init__(**kwargs)

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def list_tools(self) -> list[MCPTool]:
        """List all available tools."""
        return [spec.to_mcp_tool() for spec in self._registry.list()]

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> CallToolResult:  # type: ignore[override]
        """Call a tool by name with arguments.

        The blocking OCM calls run in a worker thread so concurrent HTTP
        requests are served independently.

        Raises:
            ToolError: If no tool with that name is registered.
        """
        if name not in self._registry:
            raise ToolError(f"Unknown tool: {name}")

        context = self._transport_context()
        result = await anyio.to_thread.run_sync(self._registry.dispatch, name, context, arguments)
        return result.to_call_tool_result()

    def _transport_context(self) -> TransportContext:
        """Build the credential context for the request being served."""
        if self._transport == TransportMode.STDIO:
            return TransportContext.for_stdio()

        try:
            request = self.get_context().request_context.request
        except ValueError:
            request = None
        return TransportContext.from_request(self._transport, request)


class RosaMCPServer:
    """ROSA MCP server: configuration, tool registry, and MCP wiring."""

    def __init__(self, config: RosaMCPConfig | None = None) -> None:
        self._config = config or get_config()
        self._registry: ToolRegistry | None = None
        self._mcp: RosaFastMCP | None = None

    @property
    def config(self) -> RosaMCPConfig:
        """Get server configuration."""
        return self._config

    @property
    def registry(self) -> ToolRegistry:
        """Get the tool registry.

        Raises:
            RuntimeError: If the server is not initialized.
        """
        if self._registry is None:
            raise RuntimeError("Server not initialized. Tool registry not available.")
        return self._registry

    @property
    def mcp(self) -> RosaFastMCP:
        """Get the MCP server instance.

        Raises:
            RuntimeError: If the server is not initialized.
        """
        if self._mcp is None:
            raise RuntimeError("Server not initialized.")
        return self._mcp

    def _create_lifespan(self) -> Callable[[Any], AbstractAsyncContextManager[None]]:
        """Create the lifespan context manager for the MCP server."""
        server_self = self

        @asynccontextmanager
        async def lifespan(_app: Any) -> AsyncIterator[None]:
            logger.info(
                f"ROSA MCP server started with {len(server_self.registry)} tools "
                f"on {server_self._config.transport.value} transport"
            )
            try:
                yield
            finally:
                logger.info("ROSA MCP server shut down")

        return lifespan

    def create_mcp(self, registry: ToolRegistry | None = None) -> RosaFastMCP:
        """Create and configure the FastMCP server."""
        self._registry = registry or ToolRegistry(self._config)

        mcp = RosaFastMCP(
            self._registry,
            self._config.transport,
            name=SERVER_NAME,
            instructions=INSTRUCTIONS,
            lifespan=self._create_lifespan(),
            host=self._config.host,
            port=self._config.port,
            log_level=self._config.log_level.value,
        )
        self._mcp = mcp

        from rosa_mcp.domains.prompts.prompts import register_prompts

        register_prompts(mcp)
        self._register_health_endpoint(mcp)

        return mcp

    def _register_health_endpoint(self, mcp: FastMCP) -> None:
        """Register the /health liveness endpoint for HTTP transports."""

        @mcp.custom_route("/health", methods=["GET"])
        async def health(_request: Request) -> JSONResponse:
            ready = self._registry is not None
            body = {
                "status": "healthy" if ready else "unhealthy",
                "version": __version__,
                "transport": self._config.transport.value,
                "tools": len(self._registry) if self._registry is not None else 0,
            }
            status = HTTPStatus.OK if ready else HTTPStatus.SERVICE_UNAVAILABLE
            return JSONResponse(body, status_code=status)

    def run(self) -> None:
        """Run the server on the configured transport."""
        mcp = self.mcp
        transport = self._config.transport

        if transport == TransportMode.STDIO:
            logger.info("Running with stdio transport")
            mcp.run(transport="stdio")
        elif transport == TransportMode.SSE:
            logger.info(f"Running with SSE transport on {self._config.host}:{self._config.port}")
            mcp.run(transport="sse", mount_path=self._config.sse_mount_path)
        elif transport == TransportMode.STREAMABLE_HTTP:
            logger.info(
                f"Running with streamable-http transport on {self._config.host}:{self._config.port}"
            )
            mcp.run(transport="streamable-http")
        else:
            raise ValueError(f"unsupported transport mode: {transport}")


def create_server(config: RosaMCPConfig | None = None) -> RosaMCPServer:
    """Create a server with its MCP instance initialized.

    This is the main entry point for creating the server.
    """
    server = RosaMCPServer(config)
    server.create_mcp()
    return server
