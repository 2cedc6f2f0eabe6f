"""
Opaque role identifiers.

A role is identified by the hex encoding of ``"<database>.<role>"``, which is
also the ``_id`` of its document in ``admin.system.roles``. Decoding splits on
the first dot, so database names may not contain one; role names may.
"""
import re
from typing import NamedTuple

from rolesync.core.exceptions import IdentityFormatError

SEPARATOR = "."

_HEX_TOKEN = re.compile(r"[0-9a-fA-F]*")


class RoleIdentity(NamedTuple):
    """Decoded role identifier. Field order is (role, database)."""
    role: str
    database: str

    @property
    def document_id(self) -> str:
        """``_id`` of the role document in ``admin.system.roles``."""
        return f"{self.database}{SEPARATOR}{self.role}"


def encode_role_id(database: str, role: str) -> str:
    """
    Encode a (database, role) pair into a persistable token.

    Raises:
        IdentityFormatError: If either part is empty or the database name
            contains the separator
    """
    if not database or not role:
        raise IdentityFormatError("database and role name must not be empty")
    if SEPARATOR in database:
        raise IdentityFormatError(f"database name must not contain '{SEPARATOR}': {database}")
    return f"{database}{SEPARATOR}{role}".encode().hex()


def parse_role_id(token: str) -> RoleIdentity:
    """
    Decode a token produced by encode_role_id.

    Args:
        token: Hex-encoded ``database.role`` string

    Returns:
        RoleIdentity(role, database)

    Raises:
        IdentityFormatError: If the token is not valid hex/UTF-8, or does not
            split into two non-empty parts
    """
    # hex digits only; bytes.fromhex alone would accept embedded whitespace
    if not isinstance(token, str) or not _HEX_TOKEN.fullmatch(token):
        raise IdentityFormatError(f"unexpected format of ID Error : {token!r} is not a hex string")

    try:
        decoded = bytes.fromhex(token).decode()
    except (ValueError, TypeError) as e:
        raise IdentityFormatError(f"unexpected format of ID Error : {e}") from e

    database, sep, role = decoded.partition(SEPARATOR)
    if not sep or not database or not role:
        raise IdentityFormatError(f"unexpected format of ID ({token}), expected database.roleName")
    return RoleIdentity(role=role, database=database)
