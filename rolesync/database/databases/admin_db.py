"""
Admin database configuration.
Holds the server's own role documents.
"""

DB_NAME = "admin"


class Collections:
    """Collection names in admin."""
    SYSTEM_ROLES = "system.roles"
