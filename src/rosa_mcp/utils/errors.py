"""Error taxonomy and backend error classification for ROSA MCP.

Every failure that can happen while serving a tool call maps onto one
:class:`ErrorCode`. The dispatch layer recovers all of them and turns them
into an error ``ToolResult`` through :func:`classify`, so agents always get
a renderable message instead of a transport fault.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from rosa_mcp.tools.dispatch import ToolResult

logger = logging.getLogger(__name__)

# Prefix agents can match on to decide "reauthenticate, then retry".
AUTHENTICATION_FAILED_PREFIX = "AUTHENTICATION_FAILED:"

# Backend codes reserved for authentication/authorization failures.
CREDENTIAL_EXPIRED_CODES = frozenset(
    {
        "CLUSTERS-MGMT-401",
        "ACCT-MGMT-401",
        "AUTHZ-401",
        "invalid_grant",
        "invalid_token",
        "unauthorized_client",
    }
)

# Any OCM service code with this suffix is an authentication failure.
CREDENTIAL_EXPIRED_CODE_SUFFIX = "-401"

# Reason substrings (matched case-insensitively) that name the credential itself.
# Bare "expired" or "unauthorized" also appear in ordinary rejections.
CREDENTIAL_EXPIRED_REASONS = (
    "token expired",
    "token is expired",
    "token has expired",
    "invalid token",
    "invalid_grant",
    "offline user session not found",
    "not authenticated",
)


class ErrorCode(str, Enum):
    """Stable error identifiers surfaced by the server."""

    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    MALFORMED_CREDENTIAL_HEADER = "MALFORMED_CREDENTIAL_HEADER"
    UNSUPPORTED_TRANSPORT = "UNSUPPORTED_TRANSPORT"
    SESSION_BUILD_FAILED = "SESSION_BUILD_FAILED"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    BACKEND_REJECTED = "BACKEND_REJECTED"
    CREDENTIAL_EXPIRED = "CREDENTIAL_EXPIRED"
    INTERNAL = "INTERNAL"


class RosaMCPError(Exception):
    """Base exception for ROSA MCP errors."""

    code: ErrorCode = ErrorCode.INTERNAL

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class CredentialError(RosaMCPError):
    """A usable credential could not be resolved for the request."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.MISSING_CREDENTIAL) -> None:
        super().__init__(message)
        self.code = code


class SessionBuildError(RosaMCPError):
    """The OCM session could not be constructed."""

    code = ErrorCode.SESSION_BUILD_FAILED


class InvalidArgumentError(RosaMCPError):
    """A tool argument is missing or has the wrong type."""

    code = ErrorCode.INVALID_ARGUMENT

    def __init__(self, argument: str, message: str) -> None:
        super().__init__(message)
        self.argument = argument


class OCMError(RosaMCPError):
    """A structured error returned by the OCM API or the SSO token endpoint."""

    code = ErrorCode.BACKEND_REJECTED

    def __init__(
        self,
        ocm_code: str,
        reason: str,
        operation_id: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(f"OCM API Error [{ocm_code}]: {reason}")
        self.ocm_code = ocm_code
        self.reason = reason
        self.operation_id = operation_id
        self.status_code = status_code

    @classmethod
    def from_response_body(cls, body: Any, status_code: int) -> OCMError:
        """Build an error from an OCM (or SSO) JSON error body.

        OCM errors look like ``{"kind": "Error", "code": ..., "reason": ...,
        "operation_id": ...}``. The SSO token endpoint answers with the OAuth2
        shape ``{"error": ..., "error_description": ...}``.
        """
        if not isinstance(body, dict):
            return cls(f"HTTP-{status_code}", str(body or "").strip() or "no details", None, status_code)

        if "code" in body or "reason" in body:
            return cls(
                str(body.get("code") or f"HTTP-{status_code}"),
                str(body.get("reason") or ""),
                body.get("operation_id"),
                status_code,
            )

        if "error" in body:
            return cls(
                str(body["error"]),
                str(body.get("error_description") or body["error"]),
                None,
                status_code,
            )

        return cls(f"HTTP-{status_code}", str(body), None, status_code)

    @property
    def is_credential_expired(self) -> bool:
        return _is_expiry_signal(self.ocm_code, self.reason, self.status_code)


@dataclass(frozen=True)
class ClassifiedError:
    """Backend error detail reduced to what an agent needs to act on."""

    code: str
    reason: str
    operation_id: str | None = None
    is_credential_expired: bool = False

    def describe(self) -> str:
        text = f"OCM API Error [{self.code}]: {self.reason}"
        if self.operation_id:
            text += f" (operation ID: {self.operation_id})"
        return text


def _is_expiry_signal(code: str, reason: str, status_code: int | None = None) -> bool:
    if status_code == 401:
        return True
    if code in CREDENTIAL_EXPIRED_CODES or code.endswith(CREDENTIAL_EXPIRED_CODE_SUFFIX):
        return True
    lowered = reason.lower()
    return any(marker in lowered for marker in CREDENTIAL_EXPIRED_REASONS)


def extract_detail(error: BaseException) -> ClassifiedError | None:
    """Return structured backend detail carried by ``error``, if any.

    Besides :class:`OCMError`, any exception exposing ``code`` and ``reason``
    string attributes is treated as structured backend detail.
    """
    if isinstance(error, OCMError):
        return ClassifiedError(
            code=error.ocm_code,
            reason=error.reason,
            operation_id=error.operation_id,
            is_credential_expired=error.is_credential_expired,
        )

    if isinstance(error, RosaMCPError):
        return None

    code = getattr(error, "code", None)
    reason = getattr(error, "reason", None)
    if isinstance(code, str) and isinstance(reason, str):
        operation_id = getattr(error, "operation_id", None)
        return ClassifiedError(
            code=code,
            reason=reason,
            operation_id=operation_id if isinstance(operation_id, str) else None,
            is_credential_expired=_is_expiry_signal(code, reason),
        )

    return None


def classify(error: BaseException, operation_label: str) -> ToolResult:
    """Turn any failure into an error ``ToolResult``.

    Args:
        error: The exception raised while serving the tool call.
        operation_label: Short label of the failed operation, e.g. "get_clusters".

    Returns:
        An error result. Credential expiry is prefixed with
        ``AUTHENTICATION_FAILED:``; other backend rejections reproduce the
        backend code and reason verbatim.
    """
    from rosa_mcp.tools.dispatch import ToolResult

    try:
        detail = extract_detail(error)
    except Exception as e:  # noqa: BLE001
        logger.error(f"Failed to inspect error from {operation_label}: {e}")
        detail = None

    if detail is not None and detail.is_credential_expired:
        logger.warning(f"{operation_label}: OCM rejected the credential ({detail.code})")
        return ToolResult.error(
            f"{AUTHENTICATION_FAILED_PREFIX} {detail.describe()}. "
            "The OCM token is expired or invalid; reauthenticate and retry."
        )

    if detail is not None:
        logger.info(f"{operation_label}: OCM rejected the request ({detail.code})")
        return ToolResult.error(detail.describe())

    message = getattr(error, "message", None) or str(error) or type(error).__name__
    logger.error(f"{operation_label} failed: {message}")
    return ToolResult.error(f"{operation_label} failed: {message}")
