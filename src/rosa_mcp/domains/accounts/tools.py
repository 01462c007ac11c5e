"""Tools for the authenticated OCM account."""

from typing import TYPE_CHECKING

from rosa_mcp.domains.accounts.client import AccountClient
from rosa_mcp.domains.accounts.models import Account
from rosa_mcp.tools.registry import ToolSpec

if TYPE_CHECKING:
    from rosa_mcp.clients.ocm import OCMSession
    from rosa_mcp.tools.arguments import ArgumentBag


def format_account(account: Account) -> str:
    lines = [
        "Authenticated OCM account:",
        f"  Username: {account.username}",
        f"  Account ID: {account.id}",
    ]
    if account.full_name:
        lines.append(f"  Name: {account.full_name}")
    if account.email:
        lines.append(f"  Email: {account.email}")
    if account.organization:
        org = account.organization
        lines.append(f"  Organization: {org.name or 'unknown'} (ID: {org.id})")
        if org.external_id:
            lines.append(f"  Organization external ID: {org.external_id}")
    return "\n".join(lines)


def whoami(session: "OCMSession", _args: "ArgumentBag") -> str:
    return format_account(AccountClient(session).get_current_account())


def get_tool_specs() -> list[ToolSpec]:
    """Return the account tool specs."""
    return [
        ToolSpec(
            name="whoami",
            description="Get the authenticated account",
            handler=whoami,
            operation_label="get account",
        ),
    ]
