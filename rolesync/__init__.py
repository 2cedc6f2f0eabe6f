"""
rolesync - provision and reconcile MongoDB roles over a TLS-capable client.
"""
from rolesync.config import Settings, get_settings
from rolesync.database.connections import build_client
from rolesync.schemas.role import RoleState
from rolesync.services.role_service import RoleService

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "get_settings",
    "build_client",
    "RoleState",
    "RoleService",
]
