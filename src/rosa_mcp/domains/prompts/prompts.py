"""Prompt registration for ROSA MCP.

Provides guidance prompts that walk AI agents through the AWS-side
preparation a ROSA HCP cluster needs before ``create_rosa_hcp_cluster``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp.prompts.base import Message, UserMessage
from mcp.types import ResourceLink

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

ROSA_HCP_DOCS_URL = (
    "https://cloud.redhat.com/learning/learn:getting-started-red-hat-openshift-service-aws-rosa/"
    "resource/resources:creating-rosa-hcp-clusters-using-default-options#page-title"
)

PREREQUISITES_GUIDE = """# ROSA HCP Prerequisites Guide

Creating a ROSA cluster with hosted control planes (HCP) needs AWS resources
that the `create_rosa_hcp_cluster` tool does not create itself. Complete these
steps with the `rosa` and `aws` CLIs first, then pass the resulting IDs and
ARNs to the tool.

## 1. Enable ROSA and check quotas
- Enable the ROSA service in the AWS console for the target account.
- `rosa verify quota --region <region>` confirms the account has capacity.
- `rosa login` with the same Red Hat account the MCP server authenticates as
  (use the `whoami` tool to check).

## 2. Account roles
- `rosa create account-roles --hosted-cp --mode auto`
- Note the ARNs of the **Installer** role (`role_arn`), the **Support** role
  (`supporting_role_arn`), and the **Worker** role (`worker_role_arn`).

## 3. OIDC configuration
- `rosa create oidc-config --mode auto`
- Note the OIDC config ID (`oidc_config_id`).

## 4. Operator roles
- `rosa create operator-roles --hosted-cp --prefix <prefix> --oidc-config-id <id> --installer-role-arn <role_arn>`
- The prefix becomes `operator_role_prefix`.

## 5. Networking
- A VPC with at least one private subnet (and one public subnet for a public
  cluster) in the target region, e.g. via `rosa create network`.
- Pass the subnet IDs as `subnet_ids`, and optionally their zones as
  `availability_zones`.

## 6. Identities
- `aws_account_id`: the AWS account that hosts the cluster.
- `billing_account_id`: the AWS account billed for ROSA (often the same).
- `rosa_creator_arn`: ARN of the IAM user or role creating the cluster
  (`aws sts get-caller-identity`).

## 7. After creation
- Follow progress with `get_cluster`; the cluster is usable when its state is `ready`.
- Add users with `setup_htpasswd_identity_provider`.
"""


def register_prompts(mcp: FastMCP) -> None:
    """Register all prompts with the MCP server.

    Args:
        mcp: The FastMCP server instance to register prompts with.
    """

    @mcp.prompt(
        name="rosa_hcp_prerequisites_guide",
        description=(
            "Comprehensive guidance on ROSA HCP cluster creation prerequisites and setup steps"
        ),
    )
    def rosa_hcp_prerequisites_guide() -> list[Message]:
        """Return the guide text followed by a link to the official documentation."""
        return [
            UserMessage(PREREQUISITES_GUIDE),
            UserMessage(
                ResourceLink(
                    type="resource_link",
                    uri=ROSA_HCP_DOCS_URL,
                    name="ROSA HCP Documentation",
                    description=(
                        "Official Red Hat documentation for creating ROSA HCP clusters "
                        "using default options"
                    ),
                    mimeType="text/html",
                )
            ),
        ]
