"""
Role, privilege and user models mirroring the server's access-control documents.
"""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Resource(BaseModel):
    """Privilege target. An empty ``db`` or ``collection`` matches any."""
    model_config = ConfigDict(extra="ignore")

    db: str = Field(default="", description="Database name")
    collection: str = Field(default="", description="Collection name")


class Privilege(BaseModel):
    """A set of actions granted on a resource."""
    model_config = ConfigDict(extra="ignore")

    resource: Resource
    actions: list[str] = Field(default_factory=list)

    def to_document(self) -> dict[str, Any]:
        return {
            "resource": {"db": self.resource.db, "collection": self.resource.collection},
            "actions": list(self.actions),
        }


class InheritedRole(BaseModel):
    """Reference to a role whose privileges are inherited."""
    model_config = ConfigDict(extra="ignore")

    role: str
    db: str = Field(default="")

    def to_document(self) -> dict[str, str]:
        return {"role": self.role, "db": self.db}


class RoleDefinition(BaseModel):
    """Desired definition of one role, consumed by a single create command."""
    name: str = Field(..., min_length=1)
    database: str = Field(default="admin")
    privileges: list[Privilege] = Field(default_factory=list)
    inherited_roles: list[InheritedRole] = Field(default_factory=list)


class ServerRoleView(BaseModel):
    """
    One entry of a ``rolesInfo`` reply.

    ``roles`` holds the directly granted roles; ``inherited_roles`` is the
    server's transitive resolution of them.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    role: str
    db: str
    privileges: list[Privilege] = Field(default_factory=list)
    roles: list[InheritedRole] = Field(default_factory=list)
    inherited_roles: list[InheritedRole] = Field(default_factory=list, alias="inheritedRoles")


class DbUser(BaseModel):
    """Database user credentials for createUser."""
    name: str
    password: str = Field(..., repr=False)
