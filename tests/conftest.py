"""Shared fixtures for ROSA MCP tests."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest
from ocm_fakes import OCM_URL, FakeOCM

from rosa_mcp.auth import Credential, CredentialKind
from rosa_mcp.clients.ocm import OCMSession, open_session
from rosa_mcp.config import OFFLINE_TOKEN_ENV, RosaMCPConfig


@pytest.fixture(autouse=True)
def clear_offline_token_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own OCM token out of every test."""
    monkeypatch.delenv(OFFLINE_TOKEN_ENV, raising=False)


@pytest.fixture
def config() -> RosaMCPConfig:
    """Create a configuration with defaults only."""
    return RosaMCPConfig()


@pytest.fixture
def fake_ocm() -> FakeOCM:
    return FakeOCM()


@pytest.fixture
def ocm_session(fake_ocm: FakeOCM) -> Generator[OCMSession, Any, None]:
    """Create a session authenticated with an access token against the fake API."""
    session = open_session(
        Credential(value="access-token", kind=CredentialKind.ACCESS),
        OCM_URL,
        "cloud-services",
        transport=fake_ocm.transport,
    )
    with session:
        yield session
