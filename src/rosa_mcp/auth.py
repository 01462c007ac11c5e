"""Credential resolution for OCM requests.

A credential is resolved per tool call from the transport the call arrived
on. On stdio the only source is the ``OCM_OFFLINE_TOKEN`` environment
variable. On the HTTP transports each request carries its own headers:
an ``Authorization: Bearer`` access token wins over an ``X-OCM-Offline-Token``
header, and the environment variable is the last resort.

The environment fallback on HTTP transports lets a remote caller without
credentials act with the server operator's token. It is kept for
compatibility with existing deployments and logged every time it is used.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from rosa_mcp.config import OFFLINE_TOKEN_ENV, TransportMode
from rosa_mcp.utils.errors import CredentialError, ErrorCode

if TYPE_CHECKING:
    from starlette.requests import Request

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "authorization"
OFFLINE_TOKEN_HEADER = "x-ocm-offline-token"

_BEARER_RE = re.compile(r"^bearer (.*)$", re.IGNORECASE | re.DOTALL)


class CredentialKind(str, Enum):
    """How a credential authenticates against OCM."""

    ACCESS = "access"
    """Short-lived bearer token used directly on API calls."""

    OFFLINE = "offline"
    """Long-lived refresh token the session exchanges for access tokens."""


@dataclass(frozen=True)
class Credential:
    """A resolved OCM credential. Lives only for one tool call."""

    value: str = field(repr=False)
    kind: CredentialKind

    def __repr__(self) -> str:
        return f"Credential(kind={self.kind.value}, value=<redacted>)"


@dataclass(frozen=True)
class TransportContext:
    """Per-request input to credential resolution.

    ``headers`` holds a private, lower-cased copy of the request headers for
    HTTP transports and is ``None`` on stdio. ``environ`` is the environment
    mapping consulted for the offline token; it defaults to ``os.environ`` and
    is read at resolution time.
    """

    transport: TransportMode | str
    headers: Mapping[str, str] | None = None
    environ: Mapping[str, str] | None = field(default=None, repr=False)

    @classmethod
    def for_stdio(cls, environ: Mapping[str, str] | None = None) -> TransportContext:
        return cls(transport=TransportMode.STDIO, environ=environ)

    @classmethod
    def from_headers(
        cls,
        transport: TransportMode | str,
        headers: Mapping[str, str] | None,
        environ: Mapping[str, str] | None = None,
    ) -> TransportContext:
        """Build a context from raw headers, normalising names to lower case.

        When a header repeats, the first value wins.
        """
        normalized: dict[str, str] = {}
        for name, value in (headers or {}).items():
            normalized.setdefault(name.lower(), value)
        return cls(transport=transport, headers=normalized, environ=environ)

    @classmethod
    def from_request(
        cls,
        transport: TransportMode | str,
        request: Request | Any | None,
    ) -> TransportContext:
        """Build a context from the Starlette request behind an MCP call.

        stdio calls have no HTTP request; HTTP calls without one (which should
        not happen) get an empty header set.
        """
        if transport == TransportMode.STDIO:
            return cls.for_stdio()

        headers: dict[str, str] = {}
        raw_headers = getattr(request, "headers", None)
        if raw_headers is not None:
            for name, value in raw_headers.items():
                headers.setdefault(name.lower(), value)
        return cls(transport=transport, headers=headers)

    def env(self, name: str) -> str | None:
        source = self.environ if self.environ is not None else os.environ
        return source.get(name)


def extract_bearer_token(value: str | None) -> str:
    """Extract the token from an ``Authorization`` header value.

    The scheme is matched case-insensitively and must be followed by exactly
    one space; surrounding whitespace of the token is trimmed.

    Raises:
        CredentialError: With ``MALFORMED_CREDENTIAL_HEADER`` if the value is
            empty, uses another scheme, or carries no token.
    """
    if not value:
        raise CredentialError(
            "missing or empty Authorization header", ErrorCode.MALFORMED_CREDENTIAL_HEADER
        )

    match = _BEARER_RE.match(value)
    if match is None:
        raise CredentialError(
            "Authorization header must use Bearer scheme", ErrorCode.MALFORMED_CREDENTIAL_HEADER
        )

    token = match.group(1)
    if token[:1].isspace():
        raise CredentialError(
            "invalid Authorization header format", ErrorCode.MALFORMED_CREDENTIAL_HEADER
        )

    token = token.strip()
    if not token:
        raise CredentialError("empty Bearer token", ErrorCode.MALFORMED_CREDENTIAL_HEADER)
    return token


def _resolve_from_environment(context: TransportContext) -> Credential | None:
    token = context.env(OFFLINE_TOKEN_ENV)
    if not token:
        return None
    return Credential(value=token, kind=CredentialKind.OFFLINE)


def _resolve_from_headers(headers: Mapping[str, str]) -> Credential | None:
    # Log only header names; values may be tokens.
    logger.debug(f"Resolving credential from request headers: {sorted(headers)}")

    if AUTHORIZATION_HEADER in headers:
        try:
            token = extract_bearer_token(headers[AUTHORIZATION_HEADER])
        except CredentialError as e:
            logger.warning(f"Ignoring Authorization header: {e}")
        else:
            logger.debug("Using access token from Authorization header")
            return Credential(value=token, kind=CredentialKind.ACCESS)

    offline_token = headers.get(OFFLINE_TOKEN_HEADER, "")
    if offline_token:
        logger.debug("Using offline token from X-OCM-Offline-Token header")
        return Credential(value=offline_token, kind=CredentialKind.OFFLINE)

    return None


def resolve_credential(context: TransportContext) -> Credential:
    """Resolve the OCM credential for one tool call.

    Args:
        context: The transport and per-request data of the call.

    Returns:
        The resolved credential.

    Raises:
        CredentialError: ``MISSING_CREDENTIAL`` when no source yields a token,
            ``UNSUPPORTED_TRANSPORT`` for an unknown transport.
    """
    try:
        transport = TransportMode(context.transport)
    except ValueError:
        logger.error(f"Authentication failed: unsupported transport mode: {context.transport}")
        raise CredentialError(
            f"unsupported transport mode: {context.transport}", ErrorCode.UNSUPPORTED_TRANSPORT
        ) from None

    if transport == TransportMode.STDIO:
        credential = _resolve_from_environment(context)
        if credential is None:
            raise CredentialError(f"missing or empty {OFFLINE_TOKEN_ENV} environment variable")
        return credential

    credential = _resolve_from_headers(context.headers or {})
    if credential is not None:
        return credential

    credential = _resolve_from_environment(context)
    if credential is not None:
        logger.warning(
            f"No credential headers on {transport.value} request; "
            f"falling back to {OFFLINE_TOKEN_ENV} from the server environment"
        )
        return credential

    logger.error("Authentication failed: no credential in headers or environment")
    raise CredentialError(
        f"{transport.value} transport requires an Authorization: Bearer header, "
        f"an X-OCM-Offline-Token header, or the {OFFLINE_TOKEN_ENV} environment variable"
    )
