"""
Database module - client construction, access-control commands and database definitions.
"""
from rolesync.database.connections import build_client, verify_connection
from rolesync.database.commands import (
    create_role,
    create_user,
    delete_role_document,
    get_role,
)
from rolesync.database.databases import admin_db

__all__ = [
    "build_client",
    "verify_connection",
    "create_role",
    "create_user",
    "delete_role_document",
    "get_role",
    "admin_db",
]
