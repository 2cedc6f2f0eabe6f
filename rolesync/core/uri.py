"""
Connection string assembly.
"""
from typing import Optional

SCHEME = "mongodb"


def add_arg(arguments: str, new_arg: str) -> str:
    """Append ``key=value`` to a query string, opening it with ``/?``."""
    if arguments:
        return f"{arguments}&{new_arg}"
    return f"/?{new_arg}"


def build_connection_uri(
    host: str,
    port: int,
    ssl: bool = False,
    replica_set: str = "",
    retry_writes: Optional[bool] = None,
) -> str:
    """
    Build ``mongodb://host:port`` with its query options.

    Each option is only added when its source field is set; ``retrywrites``
    is left out entirely while the setting is unset.

    Args:
        host: Server host name
        port: Server port
        ssl: Add ``ssl=true``
        replica_set: Replica set name, skipped when empty
        retry_writes: None (unset), False or True

    Returns:
        Connection URI string
    """
    arguments = ""
    if retry_writes is not None:
        arguments = add_arg(arguments, f"retrywrites={str(retry_writes).lower()}")
    if ssl:
        arguments = add_arg(arguments, "ssl=true")
    if replica_set:
        arguments = add_arg(arguments, f"replicaSet={replica_set}")
    return f"{SCHEME}://{host}:{port}{arguments}"
