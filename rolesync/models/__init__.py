"""
Pydantic models for access-control documents.
"""
from rolesync.models.role import (
    DbUser,
    InheritedRole,
    Privilege,
    Resource,
    RoleDefinition,
    ServerRoleView,
)

__all__ = [
    "DbUser",
    "InheritedRole",
    "Privilege",
    "Resource",
    "RoleDefinition",
    "ServerRoleView",
]
