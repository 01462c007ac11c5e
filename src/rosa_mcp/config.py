"""Configuration for the ROSA MCP server.

Values come from, in increasing priority: defaults, ``ROSA_MCP_*``
environment variables, an optional TOML file, and command line flags.
The configuration is loaded once at startup and never mutated afterwards.
"""

from __future__ import annotations

import tomllib
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Environment variable holding the OCM offline token (read per call, never cached).
OFFLINE_TOKEN_ENV = "OCM_OFFLINE_TOKEN"

DEFAULT_OCM_BASE_URL = "https://api.openshift.com"
DEFAULT_OCM_TOKEN_URL = (
    "https://sso.redhat.com/auth/realms/redhat-external/protocol/openid-connect/token"
)
DEFAULT_OCM_CLIENT_ID = "cloud-services"


class TransportMode(str, Enum):
    """MCP transport the server listens on."""

    STDIO = "stdio"
    SSE = "sse"
    STREAMABLE_HTTP = "streamable-http"

    @property
    def is_http(self) -> bool:
        """Whether the transport serves many callers over HTTP."""
        return self in (TransportMode.SSE, TransportMode.STREAMABLE_HTTP)


class LogLevel(str, Enum):
    """Logging levels accepted on the command line."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class RosaMCPConfig(BaseSettings):
    """ROSA MCP server configuration.

    Loaded from environment variables with the ROSA_MCP_ prefix, or from a
    TOML file via :meth:`from_toml`.
    """

    model_config = SettingsConfigDict(
        env_prefix="ROSA_MCP_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # OCM backend
    ocm_base_url: str = Field(
        default=DEFAULT_OCM_BASE_URL,
        description="OCM API base URL",
    )
    ocm_token_url: str = Field(
        default=DEFAULT_OCM_TOKEN_URL,
        description="SSO endpoint used to exchange offline tokens for access tokens",
    )
    ocm_client_id: str = Field(
        default=DEFAULT_OCM_CLIENT_ID,
        description="OAuth client identifier used for the token exchange",
    )

    # Transport
    transport: TransportMode = Field(
        default=TransportMode.STDIO,
        description="MCP transport mode",
    )
    host: str = Field(
        default="127.0.0.1",
        description="Host to bind HTTP transports to",
    )
    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port to bind HTTP transports to",
    )
    sse_base_url: str | None = Field(
        default=None,
        description="Public base URL the SSE endpoints are exposed under",
    )

    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )

    @classmethod
    def from_toml(cls, path: str | Path, **overrides: Any) -> RosaMCPConfig:
        """Load configuration from a TOML file.

        Keys may sit at the top level or under a ``[server]`` table. Keyword
        overrides (typically CLI flags) take precedence over file values.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not valid TOML.
        """
        path = Path(path)
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {path}: {e}") from e

        values: dict[str, Any] = dict(data.get("server", {}))
        values.update({k: v for k, v in data.items() if not isinstance(v, dict)})
        values.update(overrides)
        return cls(**values)

    @property
    def sse_mount_path(self) -> str | None:
        """Path component of the public SSE base URL, if one is configured."""
        if not self.sse_base_url:
            return None
        path = urlparse(self.sse_base_url).path.rstrip("/")
        return path or None

    def validate_config(self) -> list[str]:
        """Check the configuration for problems.

        Returns:
            Warnings that do not prevent startup.

        Raises:
            ValueError: If a URL setting is unusable.
        """
        for name in ("ocm_base_url", "ocm_token_url", "sse_base_url"):
            value = getattr(self, name)
            if value is None:
                continue
            parsed = urlparse(value)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError(f"{name} must be an absolute http(s) URL, got '{value}'")

        warnings: list[str] = []
        if self.transport.is_http and self.host in ("0.0.0.0", "::"):
            warnings.append(
                f"HTTP transport is bound to all interfaces; requests without credential "
                f"headers fall back to {OFFLINE_TOKEN_ENV} from the server environment."
            )
        if not self.ocm_base_url.startswith("https://"):
            warnings.append(f"OCM base URL {self.ocm_base_url} does not use HTTPS")
        if self.sse_base_url and self.transport != TransportMode.SSE:
            warnings.append("sse_base_url is set but the SSE transport is not selected")
        return warnings


@lru_cache
def get_config() -> RosaMCPConfig:
    """Get the process-wide configuration built from the environment."""
    return RosaMCPConfig()
