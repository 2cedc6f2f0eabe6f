"""
Declared-state schemas exchanged with the orchestration host.
"""
from rolesync.schemas.role import InheritedRoleBlock, PrivilegeBlock, RoleState

__all__ = [
    "InheritedRoleBlock",
    "PrivilegeBlock",
    "RoleState",
]
