"""Pydantic models for OCM accounts."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class Organization(BaseModel):
    """Organization an OCM account belongs to."""

    id: str = Field(..., description="Organization ID")
    name: str | None = Field(None, description="Organization name")
    external_id: str | None = Field(None, description="Red Hat external organization ID")


class Account(BaseModel):
    """The authenticated OCM account."""

    id: str = Field(..., description="Account ID")
    username: str = Field(..., description="Red Hat login")
    email: str | None = Field(None, description="Contact email")
    first_name: str | None = Field(None, description="First name")
    last_name: str | None = Field(None, description="Last name")
    organization: Organization | None = Field(None, description="Owning organization")
    created_at: datetime | None = Field(None, description="When the account was created")

    @property
    def full_name(self) -> str | None:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Account":
        """Create from an accounts_mgmt ``Account`` JSON object."""
        org = data.get("organization")
        return cls(
            id=data.get("id", ""),
            username=data.get("username", ""),
            email=data.get("email"),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            organization=Organization(
                id=org.get("id", ""),
                name=org.get("name"),
                external_id=org.get("external_id"),
            )
            if isinstance(org, dict)
            else None,
            created_at=data.get("created_at"),
        )
