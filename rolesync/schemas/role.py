"""
Declared role state exchanged with the orchestration host.
"""
from typing import Optional

from pydantic import BaseModel, Field

from rolesync.models.role import (
    InheritedRole,
    Privilege,
    Resource,
    RoleDefinition,
    ServerRoleView,
)

MAX_PRIVILEGES = 10
MAX_INHERITED_ROLES = 2


class PrivilegeBlock(BaseModel):
    """Flat privilege entry as declared by the host."""
    db: str = Field(default="", description="Database the privilege applies to")
    collection: str = Field(default="", description="Collection the privilege applies to")
    actions: list[str] = Field(default_factory=list, description="Granted actions")


class InheritedRoleBlock(BaseModel):
    """Inherited role entry as declared by the host."""
    db: str = Field(default="", description="Database of the inherited role")
    role: str = Field(..., min_length=1, description="Inherited role name")


class RoleState(BaseModel):
    """Declared and observed state of one role resource."""
    id: Optional[str] = Field(None, description="Opaque identifier persisted by the host")
    database: str = Field(default="admin", description="Database owning the role")
    name: str = Field(..., min_length=1, description="Role name")
    privilege: list[PrivilegeBlock] = Field(
        default_factory=list,
        max_length=MAX_PRIVILEGES,
        description="Granted privileges",
    )
    inherited_role: list[InheritedRoleBlock] = Field(
        default_factory=list,
        max_length=MAX_INHERITED_ROLES,
        description="Roles to inherit from",
    )

    def to_definition(self) -> RoleDefinition:
        """Convert the declared blocks into the wire-level role model."""
        return RoleDefinition(
            name=self.name,
            database=self.database,
            privileges=[
                Privilege(
                    resource=Resource(db=block.db, collection=block.collection),
                    actions=block.actions,
                )
                for block in self.privilege
            ],
            inherited_roles=[
                InheritedRole(role=block.role, db=block.db)
                for block in self.inherited_role
            ],
        )

    def with_server_view(self, view: ServerRoleView, role: str, database: str) -> "RoleState":
        """Return a copy populated from what the server reports."""
        inherited = view.roles or view.inherited_roles
        return self.model_copy(update={
            "name": role,
            "database": database,
            "privilege": [
                PrivilegeBlock(
                    db=p.resource.db,
                    collection=p.resource.collection,
                    actions=list(p.actions),
                )
                for p in view.privileges
            ],
            "inherited_role": [
                InheritedRoleBlock(db=r.db, role=r.role)
                for r in inherited
            ],
        })
