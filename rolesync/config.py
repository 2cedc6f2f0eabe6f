"""
Connection configuration loaded from environment variables.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rolesync.core.exceptions import ConfigurationError
from rolesync.core.tls import (
    CertDirectorySource,
    CredentialSource,
    InlinePEMSource,
    NoCertificateSource,
)


class Settings(BaseSettings):
    """MongoDB connection settings (``MONGO_*`` environment variables)."""

    model_config = SettingsConfigDict(
        env_prefix="MONGO_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Server
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=27017)
    replica_set: str = Field(default="")
    retry_writes: Optional[bool] = Field(
        default=None,
        description="Unset leaves the driver default; true/false is sent explicitly",
    )

    # Authentication
    username: str = Field(default="")
    password: str = Field(default="")
    auth_database: str = Field(default="admin")

    # Transport security
    ssl: bool = Field(default=False)
    insecure_skip_verify: bool = Field(default=False)
    ca: str = Field(default="", description="Inline PEM bundle of trusted CAs")
    cert: str = Field(default="", description="Inline PEM client certificate")
    key: str = Field(default="", description="Inline PEM client private key")
    cert_path: str = Field(
        default="",
        description="Directory holding ca.pem, cert.pem and key.pem",
    )

    # Logging
    log_level: str = Field(default="INFO")

    def credential_source(self) -> CredentialSource:
        """
        Resolve the mutually exclusive TLS material fields into one source.

        Returns:
            InlinePEMSource, CertDirectorySource or NoCertificateSource

        Raises:
            ConfigurationError: If cert/key are not paired, or inline material
                and ``cert_path`` are both set
        """
        if self.cert or self.key:
            if not self.cert or not self.key:
                raise ConfigurationError(
                    "cert and key material must be specified together",
                    field="cert" if not self.cert else "key",
                )
            if self.cert_path:
                raise ConfigurationError(
                    "cert_path must not be specified",
                    field="cert_path",
                )
            return InlinePEMSource(
                ca=self.ca.encode(),
                cert=self.cert.encode(),
                key=self.key.encode(),
            )

        if self.cert_path:
            return CertDirectorySource(path=self.cert_path)

        return NoCertificateSource(ca=self.ca.encode())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
