"""
Database definitions and collection constants.
"""
from rolesync.database.databases import admin_db

__all__ = ["admin_db"]
