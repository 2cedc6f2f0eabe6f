"""
TLS credential resolution and policy construction.

The driver only reads TLS material from files, so a policy is parsed and
validated in memory first, then written to a private directory right before
the client is constructed.
"""
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from rolesync.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CA_FILE = "ca.pem"
CERT_FILE = "cert.pem"
KEY_FILE = "key.pem"
CLIENT_FILE = "client.pem"

_PEM_CERTIFICATE = re.compile(
    rb"-----BEGIN CERTIFICATE-----\r?\n.*?-----END CERTIFICATE-----",
    re.DOTALL,
)


# ==================== Credential sources ====================

@dataclass(frozen=True)
class InlinePEMSource:
    """CA, certificate and key supplied as PEM text in the configuration."""
    ca: bytes = field(repr=False)
    cert: bytes = field(repr=False)
    key: bytes = field(repr=False)


@dataclass(frozen=True)
class CertDirectorySource:
    """Directory holding ``ca.pem``, ``cert.pem`` and ``key.pem``."""
    path: str


@dataclass(frozen=True)
class NoCertificateSource:
    """No client certificate; a CA bundle may still be configured."""
    ca: bytes = field(default=b"", repr=False)


CredentialSource = Union[InlinePEMSource, CertDirectorySource, NoCertificateSource]


class MaterialKind(str, Enum):
    """Which client-factory branch a configuration selects."""
    INLINE = "inline"
    DIRECTORY = "directory"
    CA_ONLY = "ca_only"
    NONE = "none"


@dataclass(frozen=True)
class CredentialMaterial:
    """Raw PEM buffers, each possibly empty."""
    kind: MaterialKind
    ca: bytes = field(default=b"", repr=False)
    cert: bytes = field(default=b"", repr=False)
    key: bytes = field(default=b"", repr=False)


def _read_optional(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return b""
    except OSError as e:
        raise ConfigurationError(f"could not read {path}: {e}", field="cert_path") from e


def load_credential_material(source: CredentialSource) -> CredentialMaterial:
    """
    Load raw PEM bytes for a credential source.

    Args:
        source: One of the resolved credential source variants

    Returns:
        CredentialMaterial tagged with the branch it selects
    """
    if isinstance(source, InlinePEMSource):
        return CredentialMaterial(
            kind=MaterialKind.INLINE,
            ca=source.ca,
            cert=source.cert,
            key=source.key,
        )

    if isinstance(source, CertDirectorySource):
        directory = Path(source.path)
        return CredentialMaterial(
            kind=MaterialKind.DIRECTORY,
            ca=_read_optional(directory / CA_FILE),
            cert=_read_optional(directory / CERT_FILE),
            key=_read_optional(directory / KEY_FILE),
        )

    if source.ca:
        return CredentialMaterial(kind=MaterialKind.CA_ONLY, ca=source.ca)
    return CredentialMaterial(kind=MaterialKind.NONE)


# ==================== TLS policy ====================

@dataclass(frozen=True)
class ClientKeyPair:
    """A client certificate chain and the private key matching its leaf."""
    chain: tuple[x509.Certificate, ...]
    key: Any = field(repr=False)

    def to_pem(self) -> bytes:
        certs = b"".join(c.public_bytes(serialization.Encoding.PEM) for c in self.chain)
        key = self.key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
        return certs + key


@dataclass(frozen=True)
class TLSPolicy:
    """Resolved trust roots and optional client identity for one connection."""
    root_cas: tuple[x509.Certificate, ...] = ()
    client_key_pair: Optional[ClientKeyPair] = None
    insecure: bool = False

    def ca_pem(self) -> bytes:
        return b"".join(c.public_bytes(serialization.Encoding.PEM) for c in self.root_cas)


def parse_ca_bundle(ca: bytes) -> tuple[x509.Certificate, ...]:
    """
    Parse every PEM certificate in a CA bundle.

    Blocks that fail to parse are skipped with a warning.

    Raises:
        ConfigurationError: If no certificate could be parsed
    """
    certs = []
    for block in _PEM_CERTIFICATE.findall(ca):
        try:
            certs.append(x509.load_pem_x509_certificate(block))
        except ValueError as e:
            logger.warning(f"Skipping unparseable certificate in ca bundle: {e}")
    if not certs:
        raise ConfigurationError("could not parse any certificate from ca", field="ca")
    return tuple(certs)


def parse_key_pair(cert: bytes, key: bytes) -> ClientKeyPair:
    """
    Parse a client certificate and private key as one credential.

    Raises:
        ConfigurationError: If either side is malformed or the key does not
            belong to the certificate
    """
    try:
        chain = x509.load_pem_x509_certificates(cert)
    except ValueError as e:
        raise ConfigurationError(f"could not parse client certificate: {e}", field="cert") from e

    try:
        private_key = serialization.load_pem_private_key(key, password=None)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"could not parse client key: {e}", field="key") from e

    spki = serialization.PublicFormat.SubjectPublicKeyInfo
    leaf_public = chain[0].public_key().public_bytes(serialization.Encoding.DER, spki)
    key_public = private_key.public_key().public_bytes(serialization.Encoding.DER, spki)
    if leaf_public != key_public:
        raise ConfigurationError("private key does not match certificate public key", field="key")

    return ClientKeyPair(chain=tuple(chain), key=private_key)


def build_tls_policy(
    material: CredentialMaterial,
    insecure_skip_verify: bool = False,
) -> Optional[TLSPolicy]:
    """
    Build the TLS policy for a connection attempt.

    An empty CA bundle turns off server certificate verification instead of
    falling back to the system trust store. For the directory source, a
    missing cert or key file also turns verification off.

    Args:
        material: Raw credential buffers from load_credential_material
        insecure_skip_verify: Force verification off on any TLS branch

    Returns:
        TLSPolicy, or None when no TLS material is configured at all
    """
    if material.kind is MaterialKind.NONE:
        return None

    insecure = insecure_skip_verify
    key_pair = None

    if material.kind is MaterialKind.INLINE:
        key_pair = parse_key_pair(material.cert, material.key)
    elif material.kind is MaterialKind.DIRECTORY:
        if material.cert and material.key:
            key_pair = parse_key_pair(material.cert, material.key)
        else:
            logger.warning("cert.pem or key.pem missing from cert_path; server certificate will not be verified")
            insecure = True

    root_cas: tuple[x509.Certificate, ...] = ()
    if material.ca:
        root_cas = parse_ca_bundle(material.ca)
    else:
        logger.warning("No CA configured; server certificate will not be verified")
        insecure = True

    return TLSPolicy(root_cas=root_cas, client_key_pair=key_pair, insecure=insecure)


def write_policy_files(policy: TLSPolicy, directory: Path) -> dict[str, Any]:
    """
    Write a policy to ``directory`` and return the matching driver options.

    Args:
        policy: Validated TLS policy
        directory: Private directory that outlives client construction only

    Returns:
        Keyword arguments for the MongoDB client constructor
    """
    options: dict[str, Any] = {"tls": True}

    if policy.root_cas:
        ca_file = directory / CA_FILE
        ca_file.write_bytes(policy.ca_pem())
        options["tlsCAFile"] = str(ca_file)

    if policy.client_key_pair is not None:
        client_file = directory / CLIENT_FILE
        client_file.touch(mode=0o600)
        client_file.write_bytes(policy.client_key_pair.to_pem())
        options["tlsCertificateKeyFile"] = str(client_file)

    if policy.insecure:
        options["tlsInsecure"] = True

    return options
