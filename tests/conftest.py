"""
Global test fixtures for rolesync.

This module provides shared fixtures for all tests including:
- Generated PEM material (CA, client certificate and keys)
- An in-memory fake of the server's access-control commands
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Optional

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID
from pymongo.errors import OperationFailure

from rolesync.schemas.role import RoleState


# =============================================================================
# PEM Material
# =============================================================================

def _key_pem(key) -> str:
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()


def _cert_pem(cert: x509.Certificate) -> str:
    return cert.public_bytes(serialization.Encoding.PEM).decode()


def _issue(common_name: str, public_key, signing_key, issuer: Optional[x509.Name], is_ca: bool):
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer or subject)
        .public_key(public_key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=is_ca, path_length=None), critical=True)
        .sign(signing_key, hashes.SHA256())
    )


@pytest.fixture(scope="session")
def pem() -> SimpleNamespace:
    """
    PEM strings for a test CA, a second CA, a client certificate signed by
    the first CA, its key, and an unrelated key.
    """
    ca_key = ec.generate_private_key(ec.SECP256R1())
    ca_cert = _issue("rolesync-test-ca", ca_key.public_key(), ca_key, None, is_ca=True)

    other_ca_key = ec.generate_private_key(ec.SECP256R1())
    other_ca_cert = _issue("rolesync-other-ca", other_ca_key.public_key(), other_ca_key, None, is_ca=True)

    client_key = ec.generate_private_key(ec.SECP256R1())
    client_cert = _issue("rolesync-client", client_key.public_key(), ca_key, ca_cert.subject, is_ca=False)

    stray_key = ec.generate_private_key(ec.SECP256R1())

    return SimpleNamespace(
        ca=_cert_pem(ca_cert),
        ca_bundle=_cert_pem(ca_cert) + _cert_pem(other_ca_cert),
        cert=_cert_pem(client_cert),
        key=_key_pem(client_key),
        stray_key=_key_pem(stray_key),
    )


@pytest.fixture
def cert_dir(tmp_path, pem):
    """Directory laid out like a cert_path source with all three files."""
    (tmp_path / "ca.pem").write_text(pem.ca)
    (tmp_path / "cert.pem").write_text(pem.cert)
    (tmp_path / "key.pem").write_text(pem.key)
    return tmp_path


# =============================================================================
# Fake Server
# =============================================================================

class _DeleteResult:
    def __init__(self, deleted_count: int):
        self.deleted_count = deleted_count


class _FakeCollection:
    def __init__(self, server: "FakeMongoServer", db_name: str, name: str):
        self.server = server
        self.full_name = f"{db_name}.{name}"

    async def delete_one(self, filter: dict[str, Any]) -> _DeleteResult:
        self.server.calls.append(("delete_one", self.full_name, dict(filter)))
        if self.server.fail_on == "delete_one":
            raise OperationFailure("not authorized on admin to execute command")
        if self.full_name != "admin.system.roles":
            return _DeleteResult(0)
        removed = self.server.roles.pop(filter.get("_id"), None)
        return _DeleteResult(1 if removed else 0)


class _FakeDatabase:
    def __init__(self, server: "FakeMongoServer", name: str):
        self.server = server
        self.name = name

    def __getitem__(self, name: str) -> _FakeCollection:
        return _FakeCollection(self.server, self.name, name)

    async def command(self, command: Any) -> dict[str, Any]:
        name = command if isinstance(command, str) else next(iter(command))
        self.server.calls.append((name, self.name, command))
        if self.server.fail_on == name:
            raise OperationFailure(f"{name} failed")

        if name == "createRole":
            role_id = f"{self.name}.{command['createRole']}"
            if role_id in self.server.roles:
                raise OperationFailure(f"Role \"{command['createRole']}@{self.name}\" already exists")
            self.server.roles[role_id] = {
                "_id": role_id,
                "role": command["createRole"],
                "db": self.name,
                "privileges": command["privileges"],
                "roles": command["roles"],
                "inheritedRoles": command["roles"],
                "isBuiltin": False,
            }
            return {"ok": 1.0}

        if name == "rolesInfo":
            target = command["rolesInfo"]
            role_id = f"{target['db']}.{target['role']}"
            found = self.server.roles.get(role_id)
            return {"roles": [dict(found)] if found else [], "ok": 1.0}

        return {"ok": 1.0}


class FakeMongoServer:
    """
    In-memory stand-in for the access-control commands rolesync issues.

    Records every call in ``calls`` as (command, namespace, payload).
    Set ``fail_on`` to a command name to make it raise OperationFailure.
    """

    def __init__(self):
        self.roles: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str, Any]] = []
        self.fail_on: Optional[str] = None

    def __getitem__(self, name: str) -> _FakeDatabase:
        return _FakeDatabase(self, name)

    def calls_named(self, name: str) -> list[tuple[str, str, Any]]:
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def fake_server() -> FakeMongoServer:
    """Fresh fake server per test."""
    return FakeMongoServer()


# =============================================================================
# Role Fixtures
# =============================================================================

@pytest.fixture
def read_only_state() -> RoleState:
    """Declared state for a read-only application role."""
    return RoleState(
        name="readOnlyApp",
        database="admin",
        privilege=[{"db": "sales", "collection": "orders", "actions": ["find"]}],
    )
