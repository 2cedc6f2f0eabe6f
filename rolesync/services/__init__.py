"""
Service layer for role reconciliation.
"""
from rolesync.services.role_service import RoleService

__all__ = ["RoleService"]
