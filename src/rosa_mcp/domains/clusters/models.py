"""Pydantic models for ROSA clusters."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from rosa_mcp.utils.api import nested


class Cluster(BaseModel):
    """A cluster as returned by the clusters_mgmt API."""

    id: str = Field(..., description="Cluster ID")
    name: str = Field(..., description="Cluster name")
    external_id: str | None = Field(None, description="External cluster ID")
    state: str = Field("unknown", description="Cluster state, e.g. ready, installing, error")
    status_description: str | None = Field(None, description="Status detail reported by OCM")
    product: str | None = Field(None, description="Product ID, e.g. rosa")
    cloud_provider: str | None = Field(None, description="Cloud provider ID")
    region: str | None = Field(None, description="Cloud region")
    version: str | None = Field(None, description="OpenShift version")
    hypershift: bool = Field(False, description="Whether the control plane is hosted (HCP)")
    multi_az: bool = Field(False, description="Whether the cluster spans availability zones")
    api_url: str | None = Field(None, description="API server URL")
    console_url: str | None = Field(None, description="Web console URL")
    aws_account_id: str | None = Field(None, description="AWS account ID")
    subnet_ids: list[str] = Field(default_factory=list, description="AWS subnet IDs")
    compute_nodes: int | None = Field(None, description="Number of compute nodes")
    compute_machine_type: str | None = Field(None, description="Compute instance type")
    creation_timestamp: datetime | None = Field(None, description="When the cluster was created")

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Cluster":
        """Create from a clusters_mgmt ``Cluster`` JSON object."""
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            external_id=data.get("external_id"),
            state=data.get("state") or nested(data, "status", "state") or "unknown",
            status_description=nested(data, "status", "description"),
            product=nested(data, "product", "id"),
            cloud_provider=nested(data, "cloud_provider", "id"),
            region=nested(data, "region", "id"),
            version=nested(data, "version", "raw_id") or nested(data, "version", "id"),
            hypershift=bool(nested(data, "hypershift", "enabled")),
            multi_az=bool(data.get("multi_az")),
            api_url=nested(data, "api", "url"),
            console_url=nested(data, "console", "url"),
            aws_account_id=nested(data, "aws", "account_id"),
            subnet_ids=nested(data, "aws", "subnet_ids") or [],
            compute_nodes=nested(data, "nodes", "compute"),
            compute_machine_type=nested(data, "nodes", "compute_machine_type", "id"),
            creation_timestamp=data.get("creation_timestamp"),
        )


class ClusterCreate(BaseModel):
    """Request to create a ROSA HCP cluster."""

    name: str = Field(..., description="Cluster name")
    aws_account_id: str = Field(..., description="AWS account ID")
    billing_account_id: str = Field(..., description="AWS account billed for the cluster")
    role_arn: str = Field(..., description="Installer account role ARN")
    support_role_arn: str = Field(..., description="Support account role ARN")
    worker_role_arn: str = Field(..., description="Worker instance role ARN")
    operator_role_prefix: str = Field(..., description="Prefix of the operator IAM roles")
    oidc_config_id: str = Field(..., description="OIDC configuration ID")
    rosa_creator_arn: str = Field(..., description="ARN of the IAM identity creating the cluster")
    subnet_ids: list[str] = Field(..., description="VPC subnet IDs")
    availability_zones: list[str] = Field(default_factory=list, description="Availability zones")
    region: str = Field("us-east-1", description="AWS region")
    version: str | None = Field(None, description="OpenShift version ID, e.g. openshift-v4.19.3")
    compute_machine_type: str = Field("m5.xlarge", description="Compute instance type")
    multi_arch_enabled: bool = Field(False, description="Enable multi-architecture compute")
    private: bool = Field(False, description="Create a private cluster (no public API)")

    def to_api(self) -> dict[str, Any]:
        """Render the clusters_mgmt request body."""
        body: dict[str, Any] = {
            "name": self.name,
            "product": {"id": "rosa"},
            "hypershift": {"enabled": True},
            "ccs": {"enabled": True},
            "cloud_provider": {"id": "aws"},
            "region": {"id": self.region},
            "billing_model": "marketplace-aws",
            "multi_arch_enabled": self.multi_arch_enabled,
            "aws": {
                "account_id": self.aws_account_id,
                "billing_account_id": self.billing_account_id,
                "subnet_ids": self.subnet_ids,
                "private_link": self.private,
                "sts": {
                    "role_arn": self.role_arn,
                    "support_role_arn": self.support_role_arn,
                    "instance_iam_roles": {"worker_role_arn": self.worker_role_arn},
                    "operator_role_prefix": self.operator_role_prefix,
                    "oidc_config": {"id": self.oidc_config_id},
                },
            },
            "nodes": {
                "compute_machine_type": {"id": self.compute_machine_type},
            },
            "api": {"listening": "internal" if self.private else "external"},
            "properties": {"rosa_creator_arn": self.rosa_creator_arn},
        }
        if self.availability_zones:
            body["nodes"]["availability_zones"] = self.availability_zones
        if self.version:
            body["version"] = {"id": self.version}
        return body
