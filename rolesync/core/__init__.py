"""
Core module - identity codec, connection string, TLS policy and errors.
"""
from rolesync.core.exceptions import (
    ConfigurationError,
    IdentityFormatError,
    RoleNotFoundError,
    RolesyncError,
    ServerCommandError,
)
from rolesync.core.identity import RoleIdentity, encode_role_id, parse_role_id
from rolesync.core.uri import build_connection_uri
from rolesync.core.tls import (
    CredentialMaterial,
    MaterialKind,
    TLSPolicy,
    build_tls_policy,
    load_credential_material,
)

__all__ = [
    "ConfigurationError",
    "IdentityFormatError",
    "RoleNotFoundError",
    "RolesyncError",
    "ServerCommandError",
    "RoleIdentity",
    "encode_role_id",
    "parse_role_id",
    "build_connection_uri",
    "CredentialMaterial",
    "MaterialKind",
    "TLSPolicy",
    "build_tls_policy",
    "load_credential_material",
]
