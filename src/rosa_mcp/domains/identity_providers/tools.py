"""Tools for cluster identity providers."""

from typing import TYPE_CHECKING

from rosa_mcp.domains.identity_providers.client import IdentityProviderClient
from rosa_mcp.domains.identity_providers.htpasswd import process_user_input
from rosa_mcp.domains.identity_providers.models import IdentityProvider, MappingMethod
from rosa_mcp.tools.registry import ParamType, ToolParameter, ToolSpec

if TYPE_CHECKING:
    from rosa_mcp.clients.ocm import OCMSession
    from rosa_mcp.tools.arguments import ArgumentBag


def format_identity_provider_created(idp: IdentityProvider, cluster_id: str, user_count: int) -> str:
    lines = [
        f"Identity provider '{idp.name}' created on cluster {cluster_id}.",
        f"  Type: {idp.type}",
        f"  Mapping method: {idp.mapping_method}",
        f"  Users: {user_count}",
    ]
    if idp.id:
        lines.insert(1, f"  ID: {idp.id}")
    lines.append("It can take a few minutes before users are able to log in.")
    return "\n".join(lines)


def setup_htpasswd_identity_provider(session: "OCMSession", args: "ArgumentBag") -> str:
    cluster_id = args.require_string("cluster_id")
    users, hashed = process_user_input(args)

    client = IdentityProviderClient(session)
    idp = client.setup_htpasswd_identity_provider(
        cluster_id=cluster_id,
        name=args.get_string("name", "htpasswd"),
        mapping_method=args.get_string("mapping_method", MappingMethod.CLAIM.value),
        users=users,
        hashed=hashed,
        overwrite_existing=args.get_bool("overwrite_existing", False),
    )
    return format_identity_provider_created(idp, cluster_id, len(users))


def get_tool_specs() -> list[ToolSpec]:
    """Return the identity provider tool specs."""
    return [
        ToolSpec(
            name="setup_htpasswd_identity_provider",
            description=(
                "Setup an HTPasswd identity provider for a ROSA HCP cluster. Provide users "
                "as 'users' (username:password entries), as 'username' and 'password', or "
                "as base64-encoded 'htpasswd_file_content'."
            ),
            handler=setup_htpasswd_identity_provider,
            parameters=(
                ToolParameter(
                    "cluster_id", ParamType.STRING, "Unique cluster identifier", required=True
                ),
                ToolParameter(
                    "name", ParamType.STRING, "Name of the identity provider", default="htpasswd"
                ),
                ToolParameter(
                    "mapping_method",
                    ParamType.STRING,
                    "User mapping method (claim, lookup, generate, add)",
                    default=MappingMethod.CLAIM.value,
                ),
                ToolParameter(
                    "users",
                    ParamType.STRING_ARRAY,
                    "Users in username:password format",
                ),
                ToolParameter("username", ParamType.STRING, "Single user name"),
                ToolParameter("password", ParamType.STRING, "Password of the single user"),
                ToolParameter(
                    "htpasswd_file_content",
                    ParamType.STRING,
                    "Base64-encoded htpasswd file with pre-hashed passwords",
                ),
                ToolParameter(
                    "overwrite_existing",
                    ParamType.BOOLEAN,
                    "Allow an identity provider with the same name to exist",
                    default=False,
                ),
            ),
            operation_label="setup htpasswd identity provider",
        ),
    ]
