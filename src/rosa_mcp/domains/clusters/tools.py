"""Tools for ROSA cluster operations."""

from typing import TYPE_CHECKING

from rosa_mcp.domains.clusters.client import ClusterClient
from rosa_mcp.domains.clusters.models import Cluster, ClusterCreate
from rosa_mcp.tools.registry import ParamType, ToolParameter, ToolSpec

if TYPE_CHECKING:
    from rosa_mcp.clients.ocm import OCMSession
    from rosa_mcp.tools.arguments import ArgumentBag


def format_clusters(clusters: list[Cluster], state: str) -> str:
    if not clusters:
        return f"No clusters found in state '{state}'."

    lines = [f"Found {len(clusters)} cluster(s) in state '{state}':", ""]
    for cluster in clusters:
        kind = "ROSA HCP" if cluster.hypershift else (cluster.product or "cluster").upper()
        lines.append(f"- {cluster.name} (ID: {cluster.id})")
        lines.append(f"  Type: {kind}, Region: {cluster.region or 'unknown'}, Version: {cluster.version or 'unknown'}")
    return "\n".join(lines)


def format_cluster(cluster: Cluster) -> str:
    lines = [
        f"Cluster: {cluster.name}",
        f"  ID: {cluster.id}",
        f"  State: {cluster.state}",
    ]
    if cluster.status_description:
        lines.append(f"  Status: {cluster.status_description}")
    optional = [
        ("External ID", cluster.external_id),
        ("Product", cluster.product),
        ("Cloud provider", cluster.cloud_provider),
        ("Region", cluster.region),
        ("Version", cluster.version),
        ("API URL", cluster.api_url),
        ("Console URL", cluster.console_url),
        ("AWS account", cluster.aws_account_id),
        ("Compute machine type", cluster.compute_machine_type),
    ]
    for label, value in optional:
        if value:
            lines.append(f"  {label}: {value}")
    lines.append(f"  Hosted control plane: {'yes' if cluster.hypershift else 'no'}")
    lines.append(f"  Multi-AZ: {'yes' if cluster.multi_az else 'no'}")
    if cluster.compute_nodes is not None:
        lines.append(f"  Compute nodes: {cluster.compute_nodes}")
    if cluster.subnet_ids:
        lines.append(f"  Subnets: {', '.join(cluster.subnet_ids)}")
    if cluster.creation_timestamp:
        lines.append(f"  Created: {cluster.creation_timestamp.isoformat()}")
    return "\n".join(lines)


def format_cluster_created(cluster: Cluster) -> str:
    return "\n".join(
        [
            f"ROSA HCP cluster '{cluster.name}' creation started.",
            f"  ID: {cluster.id}",
            f"  State: {cluster.state}",
            f"  Region: {cluster.region or 'unknown'}",
            "Installation takes several minutes; use get_cluster to follow its progress.",
        ]
    )


def get_clusters(session: "OCMSession", args: "ArgumentBag") -> str:
    state = args.require_string("state")
    return format_clusters(ClusterClient(session).list_clusters(state), state)


def get_cluster(session: "OCMSession", args: "ArgumentBag") -> str:
    return format_cluster(ClusterClient(session).get_cluster(args.require_string("cluster_id")))


def create_rosa_hcp_cluster(session: "OCMSession", args: "ArgumentBag") -> str:
    request = ClusterCreate(
        name=args.require_string("cluster_name"),
        aws_account_id=args.require_string("aws_account_id"),
        billing_account_id=args.require_string("billing_account_id"),
        role_arn=args.require_string("role_arn"),
        support_role_arn=args.require_string("supporting_role_arn"),
        worker_role_arn=args.require_string("worker_role_arn"),
        operator_role_prefix=args.require_string("operator_role_prefix"),
        oidc_config_id=args.require_string("oidc_config_id"),
        rosa_creator_arn=args.require_string("rosa_creator_arn"),
        subnet_ids=args.require_string_array("subnet_ids"),
        availability_zones=args.get_string_array("availability_zones"),
        region=args.get_string("region", "us-east-1"),
        version=args.get_optional_string("version"),
        compute_machine_type=args.get_string("compute_machine_type", "m5.xlarge"),
        multi_arch_enabled=args.get_bool("multi_arch_enabled", False),
        private=args.get_bool("private", False),
    )
    return format_cluster_created(ClusterClient(session).create_cluster(request))


def _required(name: str, description: str) -> ToolParameter:
    return ToolParameter(name, ParamType.STRING, description, required=True)


def get_tool_specs() -> list[ToolSpec]:
    """Return the cluster tool specs."""
    return [
        ToolSpec(
            name="get_clusters",
            description="Retrieves the list of clusters",
            handler=get_clusters,
            parameters=(
                _required("state", "Filter clusters by state (e.g., ready, installing, error)"),
            ),
            operation_label="get clusters",
        ),
        ToolSpec(
            name="get_cluster",
            description="Retrieves the details of the cluster",
            handler=get_cluster,
            parameters=(_required("cluster_id", "Unique cluster identifier"),),
            operation_label="get cluster",
        ),
        ToolSpec(
            name="create_rosa_hcp_cluster",
            description=(
                "Provision a new ROSA HCP cluster. Account roles, an OIDC configuration, "
                "operator roles, and VPC subnets must exist beforehand; see the "
                "rosa_hcp_prerequisites_guide prompt."
            ),
            handler=create_rosa_hcp_cluster,
            parameters=(
                _required("cluster_name", "Name of the cluster"),
                _required("aws_account_id", "AWS account ID the cluster is created in"),
                _required("billing_account_id", "AWS account ID billed for the cluster"),
                _required("role_arn", "ARN of the installer account role"),
                _required("operator_role_prefix", "Prefix of the operator IAM roles"),
                _required("oidc_config_id", "ID of the OIDC configuration"),
                _required("supporting_role_arn", "ARN of the support account role"),
                _required("worker_role_arn", "ARN of the worker instance role"),
                _required("rosa_creator_arn", "ARN of the IAM identity creating the cluster"),
                ToolParameter(
                    "subnet_ids",
                    ParamType.STRING_ARRAY,
                    "VPC subnet IDs for the cluster",
                    required=True,
                ),
                ToolParameter(
                    "availability_zones",
                    ParamType.STRING_ARRAY,
                    "Availability zones for the compute nodes",
                ),
                ToolParameter("region", ParamType.STRING, "AWS region", default="us-east-1"),
                ToolParameter(
                    "version", ParamType.STRING, "OpenShift version ID, e.g. openshift-v4.19.3"
                ),
                ToolParameter(
                    "compute_machine_type",
                    ParamType.STRING,
                    "Instance type of the compute nodes",
                    default="m5.xlarge",
                ),
                ToolParameter(
                    "multi_arch_enabled",
                    ParamType.BOOLEAN,
                    "Enable multi-architecture compute",
                    default=False,
                ),
                ToolParameter(
                    "private",
                    ParamType.BOOLEAN,
                    "Create a private cluster without a public API endpoint",
                    default=False,
                ),
            ),
            operation_label="create cluster",
        ),
    ]
