"""Test fixtures for prompt tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest


@pytest.fixture
def mock_mcp() -> MagicMock:
    """Create a mock FastMCP that records prompt registrations.

    Registered functions are kept in ``_registered_prompts`` so tests can
    call them directly.
    """
    mock = MagicMock()
    registered: dict[str, dict[str, Any]] = {}

    def capture_prompt(name: str | None = None, description: str | None = None) -> Any:
        def decorator(f: Any) -> Any:
            registered[name or f.__name__] = {"function": f, "description": description}
            return f

        return decorator

    mock.prompt = capture_prompt
    mock._registered_prompts = registered
    return mock
