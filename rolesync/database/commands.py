"""
Access-control commands sent to the server.

``createUser`` and ``createRole`` always carry explicit arrays: the server
treats an omitted ``roles`` or ``privileges`` field differently from an empty
one.
"""
import logging
from typing import Optional, Sequence

from bson.son import SON
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from rolesync.core.exceptions import ServerCommandError
from rolesync.core.identity import RoleIdentity
from rolesync.database.databases import admin_db
from rolesync.models.role import DbUser, InheritedRole, Privilege, ServerRoleView

logger = logging.getLogger(__name__)


def build_create_user_command(user: DbUser, roles: Optional[Sequence[InheritedRole]]) -> SON:
    if roles:
        role_docs = [role.to_document() for role in roles]
    else:
        role_docs = []
    return SON([
        ("createUser", user.name),
        ("pwd", user.password),
        ("roles", role_docs),
    ])


def build_create_role_command(
    role_name: str,
    inherited_roles: Optional[Sequence[InheritedRole]],
    privileges: Optional[Sequence[Privilege]],
) -> SON:
    """
    Build a ``createRole`` command.

    Every combination of present/absent roles and privileges yields both
    fields, with ``[]`` standing in for an absent list.
    """
    if inherited_roles and privileges:
        privilege_docs = [p.to_document() for p in privileges]
        role_docs = [r.to_document() for r in inherited_roles]
    elif privileges:
        privilege_docs = [p.to_document() for p in privileges]
        role_docs = []
    elif inherited_roles:
        privilege_docs = []
        role_docs = [r.to_document() for r in inherited_roles]
    else:
        privilege_docs = []
        role_docs = []
    return SON([
        ("createRole", role_name),
        ("privileges", privilege_docs),
        ("roles", role_docs),
    ])


def build_roles_info_command(role_name: str, database: str) -> SON:
    return SON([
        ("rolesInfo", {"role": role_name, "db": database}),
        ("showPrivileges", True),
    ])


async def create_user(
    client: AsyncIOMotorClient,
    user: DbUser,
    roles: Optional[Sequence[InheritedRole]],
    database: str,
) -> None:
    """
    Create a database user.

    Raises:
        ServerCommandError: If the server rejects the command
    """
    command = build_create_user_command(user, roles)
    logger.debug(f"createUser {user.name} on {database}")
    try:
        await client[database].command(command)
    except PyMongoError as e:
        raise ServerCommandError("Could not create the user", e) from e


async def create_role(
    client: AsyncIOMotorClient,
    role_name: str,
    inherited_roles: Optional[Sequence[InheritedRole]],
    privileges: Optional[Sequence[Privilege]],
    database: str,
) -> None:
    """
    Create a role with its privileges and inherited roles.

    Args:
        client: Client handle owned by the caller
        role_name: Name of the role to create
        inherited_roles: Roles to inherit from, may be empty
        privileges: Privileges to grant, may be empty
        database: Database owning the role

    Raises:
        ServerCommandError: If the server rejects the command
    """
    command = build_create_role_command(role_name, inherited_roles, privileges)
    logger.debug(f"createRole {role_name} on {database}")
    try:
        await client[database].command(command)
    except PyMongoError as e:
        raise ServerCommandError("Could not create the role", e) from e


async def get_role(
    client: AsyncIOMotorClient,
    role_name: str,
    database: str,
) -> list[ServerRoleView]:
    """
    Fetch a role with its privileges via ``rolesInfo``.

    Returns:
        Matching roles as reported by the server; empty when none exists

    Raises:
        ServerCommandError: If the server rejects the command
    """
    command = build_roles_info_command(role_name, database)
    try:
        result = await client[database].command(command)
    except PyMongoError as e:
        raise ServerCommandError("Could not read the role", e) from e
    return [ServerRoleView.model_validate(doc) for doc in result.get("roles", [])]


async def delete_role_document(client: AsyncIOMotorClient, identity: RoleIdentity) -> int:
    """
    Remove a role document from ``admin.system.roles`` by its ``_id``.

    Returns:
        Number of documents deleted

    Raises:
        ServerCommandError: If the delete fails
    """
    collection = client[admin_db.DB_NAME][admin_db.Collections.SYSTEM_ROLES]
    logger.debug(f"Deleting role document {identity.document_id}")
    try:
        result = await collection.delete_one({"_id": identity.document_id})
    except PyMongoError as e:
        raise ServerCommandError("Could not delete the role", e) from e
    return result.deleted_count
