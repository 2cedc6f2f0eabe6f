"""
Role reconciliation service.

The server has no partial update for roles, so an update drops the role
document and creates the role again. The two phases are not atomic: if the
create fails after the drop succeeded, the role stays absent until the update
is retried. Only one reconcile per role identifier may run at a time.
"""
import logging

from motor.motor_asyncio import AsyncIOMotorClient

from rolesync.core.exceptions import RoleNotFoundError, ServerCommandError
from rolesync.core.identity import encode_role_id, parse_role_id
from rolesync.database.commands import create_role, delete_role_document, get_role
from rolesync.schemas.role import RoleState

logger = logging.getLogger(__name__)


class RoleService:
    """Create, read, update and delete roles against one client handle."""

    def __init__(self, client: AsyncIOMotorClient):
        """Initialize with a client owned by the caller."""
        self.client = client

    async def create(self, state: RoleState) -> RoleState:
        """
        Create a role and read it back.

        Args:
            state: Declared role; ``id`` is ignored

        Returns:
            State populated from the server, with its new ``id``

        Raises:
            ServerCommandError: If the server rejects createRole
        """
        definition = state.to_definition()
        await create_role(
            self.client,
            definition.name,
            definition.inherited_roles,
            definition.privileges,
            definition.database,
        )
        role_id = encode_role_id(definition.database, definition.name)
        logger.info(f"Created role {definition.database}.{definition.name}")
        return await self.read(state.model_copy(update={"id": role_id}))

    async def read(self, state: RoleState) -> RoleState:
        """
        Refresh a role's state from the server.

        Args:
            state: State carrying the persisted ``id``

        Returns:
            State with name, database, privileges and inherited roles as
            reported by the server; ``id`` unchanged

        Raises:
            IdentityFormatError: If ``id`` is missing or malformed
            RoleNotFoundError: If the server has no such role
            ServerCommandError: If rolesInfo fails
        """
        identity = parse_role_id(state.id or "")
        views = await get_role(self.client, identity.role, identity.database)
        if not views:
            raise RoleNotFoundError(identity.role, identity.database)
        return state.with_server_view(views[0], identity.role, identity.database)

    async def drop_existing(self, state: RoleState) -> None:
        """
        First phase of an update: delete the role stored under ``state.id``.

        Raises:
            IdentityFormatError: If ``id`` is missing or malformed
            ServerCommandError: If the delete fails
        """
        identity = parse_role_id(state.id or "")
        await delete_role_document(self.client, identity)
        logger.info(f"Dropped role {identity.document_id} for update")

    async def recreate(self, state: RoleState) -> RoleState:
        """Second phase of an update: create the role from the new declaration."""
        return await self.create(state)

    async def update(self, state: RoleState) -> RoleState:
        """
        Replace a role with a new declaration.

        The returned ``id`` equals the previous one as long as database and
        name are unchanged.

        Args:
            state: New declaration carrying the previously persisted ``id``

        Returns:
            State populated from the server after the create
        """
        await self.drop_existing(state)
        return await self.recreate(state)

    async def delete(self, state: RoleState) -> RoleState:
        """
        Delete a role and confirm it is gone.

        Returns:
            The state with ``id`` cleared

        Raises:
            IdentityFormatError: If ``id`` is missing or malformed
            ServerCommandError: If the delete fails or the role is still
                reported afterwards
        """
        identity = parse_role_id(state.id or "")
        await delete_role_document(self.client, identity)
        try:
            await self.read(state)
        except RoleNotFoundError:
            logger.info(f"Deleted role {identity.document_id}")
            return state.model_copy(update={"id": None})
        raise ServerCommandError(
            "Could not delete the role",
            RuntimeError(f"role {identity.document_id} still exists"),
        )

    async def import_state(self, role_id: str) -> RoleState:
        """
        Build state for an existing role from its identifier alone.

        Raises:
            IdentityFormatError: If ``role_id`` is malformed
            RoleNotFoundError: If the server has no such role
        """
        identity = parse_role_id(role_id)
        state = RoleState(id=role_id, name=identity.role, database=identity.database)
        return await self.read(state)
