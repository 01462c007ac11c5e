"""Per-call dispatch shim shared by every tool.

Each call runs the same sequence: validate arguments, resolve the
credential, open an OCM session, run the handler, close the session, and
classify any failure. Nothing raised inside escapes as a transport fault.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from mcp.types import CallToolResult, TextContent

from rosa_mcp.auth import resolve_credential
from rosa_mcp.clients.ocm import open_session_from_config
from rosa_mcp.tools.arguments import ArgumentBag
from rosa_mcp.tools.registry import ParamType
from rosa_mcp.utils.errors import (
    CredentialError,
    InvalidArgumentError,
    SessionBuildError,
    classify,
)

if TYPE_CHECKING:
    import httpx

    from rosa_mcp.auth import TransportContext
    from rosa_mcp.config import RosaMCPConfig
    from rosa_mcp.tools.registry import ToolSpec

logger = logging.getLogger(__name__)


class CallState(str, Enum):
    """Stages of one tool call, in order."""

    RECEIVED = "received"
    ARGS_VALIDATED = "args_validated"
    AUTHENTICATED = "authenticated"
    SESSION_OPEN = "session_open"
    BUSINESS_CALLED = "business_called"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ToolResult:
    """Text outcome of a tool call."""

    text: str
    is_error: bool = False

    @classmethod
    def success(cls, text: str) -> ToolResult:
        return cls(text=text, is_error=False)

    @classmethod
    def error(cls, text: str) -> ToolResult:
        return cls(text=text, is_error=True)

    def to_call_tool_result(self) -> CallToolResult:
        return CallToolResult(
            content=[TextContent(type="text", text=self.text)],
            isError=self.is_error,
        )


def validate_arguments(spec: ToolSpec, arguments: ArgumentBag) -> None:
    """Check required arguments are present and declared types match.

    Raises:
        InvalidArgumentError: Naming the first offending argument.
    """
    for param in spec.parameters:
        if param.name not in arguments or arguments.raw(param.name) is None:
            if param.required:
                raise InvalidArgumentError(param.name, f"missing required argument: {param.name}")
            continue

        value = arguments.raw(param.name)
        if not param.type.matches(value):
            expected = "array of strings" if param.type is ParamType.STRING_ARRAY else param.type.value
            raise InvalidArgumentError(
                param.name,
                f"invalid argument {param.name}: expected {expected}, got {type(value).__name__}",
            )
        if param.required and value in ("", []):
            raise InvalidArgumentError(param.name, f"missing required argument: {param.name}")


def _enter(spec: ToolSpec, state: CallState) -> CallState:
    logger.debug(f"{spec.name}: {state.value}")
    return state


def _fail(spec: ToolSpec, state: CallState, result: ToolResult) -> ToolResult:
    logger.debug(f"{spec.name}: {CallState.FAILED.value} after {state.value}")
    return result


def invoke(
    spec: ToolSpec,
    context: TransportContext,
    arguments: Mapping[str, Any] | None,
    config: RosaMCPConfig,
    http_transport: httpx.BaseTransport | None = None,
) -> ToolResult:
    """Run one tool call end to end.

    Every stage transition is logged at DEBUG, so a failed call shows the
    last stage it reached.

    Args:
        spec: The tool being called.
        context: Transport and per-request headers of the call.
        arguments: Raw call arguments, passed to the handler unmodified.
        config: Server configuration (OCM URLs and client id).
        http_transport: Optional httpx transport for the OCM session (tests).

    Returns:
        The tool result; errors are returned with ``is_error=True``.
    """
    state = _enter(spec, CallState.RECEIVED)
    bag = ArgumentBag(arguments)
    logger.debug(f"Tool called: {spec.name} with arguments: {bag.names()}")

    try:
        validate_arguments(spec, bag)
    except InvalidArgumentError as e:
        logger.info(f"{spec.name}: {e.message}")
        return _fail(spec, state, ToolResult.error(e.message))
    state = _enter(spec, CallState.ARGS_VALIDATED)

    try:
        credential = resolve_credential(context)
    except CredentialError as e:
        logger.warning(f"{spec.name}: authentication failed ({e.code.value}): {e.message}")
        return _fail(spec, state, ToolResult.error(f"authentication failed: {e.message}"))
    state = _enter(spec, CallState.AUTHENTICATED)

    try:
        session = open_session_from_config(credential, config, transport=http_transport)
    except SessionBuildError as e:
        return _fail(spec, state, ToolResult.error(f"authentication failed: {e.message}"))
    state = _enter(spec, CallState.SESSION_OPEN)

    try:
        with session:
            state = _enter(spec, CallState.BUSINESS_CALLED)
            text = spec.handler(session, bag)
    except Exception as e:
        return _fail(spec, state, classify(e, spec.label))

    _enter(spec, CallState.SUCCEEDED)
    return ToolResult.success(text)
