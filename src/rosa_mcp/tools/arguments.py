"""Typed access to tool call arguments."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rosa_mcp.utils.errors import InvalidArgumentError


class ArgumentBag:
    """Read-only view over the raw arguments of one tool call.

    The ``get_*`` accessors are permissive: a missing argument or one of the
    wrong type yields the default. The ``require_*`` accessors raise
    :class:`InvalidArgumentError` naming the argument instead.
    """

    def __init__(self, arguments: Mapping[str, Any] | None = None) -> None:
        self._arguments = dict(arguments or {})

    def __contains__(self, name: str) -> bool:
        return name in self._arguments

    def __repr__(self) -> str:
        return f"ArgumentBag({sorted(self._arguments)})"

    def names(self) -> list[str]:
        return sorted(self._arguments)

    def raw(self, name: str) -> Any:
        return self._arguments.get(name)

    def as_dict(self) -> dict[str, Any]:
        return dict(self._arguments)

    def get_string(self, name: str, default: str = "") -> str:
        value = self._arguments.get(name)
        return value if isinstance(value, str) else default

    def get_optional_string(self, name: str) -> str | None:
        value = self._arguments.get(name)
        return value if isinstance(value, str) and value else None

    def get_bool(self, name: str, default: bool = False) -> bool:
        value = self._arguments.get(name)
        return value if isinstance(value, bool) else default

    def get_string_array(self, name: str) -> list[str]:
        """Return the string items of an array argument.

        Non-string items are skipped; anything that is not a list yields [].
        """
        value = self._arguments.get(name)
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str)]

    def require_string(self, name: str) -> str:
        value = self._arguments.get(name)
        if not isinstance(value, str) or not value:
            raise InvalidArgumentError(name, f"missing required argument: {name}")
        return value

    def require_string_array(self, name: str) -> list[str]:
        value = self._arguments.get(name)
        if not isinstance(value, list) or not value:
            raise InvalidArgumentError(name, f"missing required argument: {name}")
        if not all(isinstance(item, str) for item in value):
            raise InvalidArgumentError(name, f"invalid argument {name}: expected an array of strings")
        return list(value)
