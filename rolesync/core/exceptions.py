"""
Error taxonomy for role provisioning.

Configuration errors are fatal and never retried. Server command errors wrap
the driver exception unchanged. A missing role is reported separately from a
failed command.
"""
from typing import Optional


class RolesyncError(Exception):
    """Base class for all rolesync errors."""


class ConfigurationError(RolesyncError, ValueError):
    """Invalid connection configuration or credential material."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class IdentityFormatError(ConfigurationError):
    """A persisted role identifier could not be decoded."""

    def __init__(self, message: str):
        super().__init__(message, field="id")


class ServerCommandError(RolesyncError):
    """A command sent to the server returned an error."""

    def __init__(self, prefix: str, error: Exception):
        super().__init__(f"{prefix}: {error}")
        self.prefix = prefix
        self.error = error


class RoleNotFoundError(RolesyncError, LookupError):
    """The server reports no role for a persisted identifier."""

    def __init__(self, role: str, database: str):
        super().__init__("Role does not exist")
        self.role = role
        self.database = database
