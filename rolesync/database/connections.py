"""
MongoDB client construction.

Every caller gets its client from build_client; the handle is owned and
closed by the caller, there is no shared module-level client.
"""
import logging
import tempfile
from pathlib import Path
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient

from rolesync.config import Settings, get_settings
from rolesync.core.tls import build_tls_policy, load_credential_material, write_policy_files
from rolesync.core.uri import build_connection_uri
from rolesync.database.databases import admin_db

logger = logging.getLogger(__name__)


def _auth_options(settings: Settings) -> dict[str, Any]:
    if not settings.username:
        return {}
    return {
        "username": settings.username,
        "password": settings.password,
        "authSource": settings.auth_database,
    }


def build_client(settings: Optional[Settings] = None) -> AsyncIOMotorClient:
    """
    Build an authenticated, optionally TLS-secured MongoDB client.

    Credential sources are checked in order: inline cert/key, cert_path
    directory, CA only, nothing. Construction is lazy; errors raised here come
    from local configuration and PEM parsing only.

    Args:
        settings: Connection settings, defaults to the environment

    Returns:
        AsyncIOMotorClient owned by the caller

    Raises:
        ConfigurationError: If credential sources conflict or PEM material
            cannot be parsed
    """
    if settings is None:
        settings = get_settings()

    source = settings.credential_source()
    material = load_credential_material(source)
    policy = build_tls_policy(material, insecure_skip_verify=settings.insecure_skip_verify)

    uri = build_connection_uri(
        host=settings.host,
        port=settings.port,
        ssl=settings.ssl,
        replica_set=settings.replica_set,
        retry_writes=settings.retry_writes,
    )
    options = _auth_options(settings)
    logger.info(f"Building MongoDB client for {settings.host}:{settings.port} ({material.kind.value} credentials)")

    if policy is None:
        return AsyncIOMotorClient(uri, **options)

    # The driver loads TLS files while constructing the client.
    with tempfile.TemporaryDirectory(prefix="rolesync-tls-") as tls_dir:
        options.update(write_policy_files(policy, Path(tls_dir)))
        return AsyncIOMotorClient(uri, **options)


async def verify_connection(client: AsyncIOMotorClient) -> None:
    """Round-trip a ping against the admin database."""
    await client[admin_db.DB_NAME].command("ping")
