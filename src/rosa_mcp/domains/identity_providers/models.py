"""Pydantic models for cluster identity providers."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class MappingMethod(str, Enum):
    """How identities from the provider map to OpenShift users."""

    CLAIM = "claim"
    LOOKUP = "lookup"
    GENERATE = "generate"
    ADD = "add"


class HTPasswdUser(BaseModel):
    """A user entry of an htpasswd identity provider."""

    username: str = Field(..., description="Login name")
    hashed_password: str = Field(..., description="htpasswd-compatible bcrypt hash")

    def to_api(self) -> dict[str, Any]:
        return {"username": self.username, "hashed_password": self.hashed_password}


class IdentityProvider(BaseModel):
    """An identity provider configured on a cluster."""

    id: str | None = Field(None, description="Identity provider ID")
    name: str = Field(..., description="Identity provider name")
    type: str = Field("HTPasswdIdentityProvider", description="Identity provider type")
    mapping_method: str = Field(MappingMethod.CLAIM.value, description="Identity mapping method")
    users: list[HTPasswdUser] = Field(default_factory=list, description="HTPasswd users")

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "IdentityProvider":
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            type=data.get("type", "unknown"),
            mapping_method=data.get("mapping_method", MappingMethod.CLAIM.value),
        )

    def to_api(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "mapping_method": self.mapping_method,
            "htpasswd": {"users": {"items": [user.to_api() for user in self.users]}},
        }
