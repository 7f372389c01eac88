# gitclient/credentials/models.py

"""
Credential models handed to git clients.

Secrets are held as ``SecretStr`` so they never show up in ``repr`` or
in model dumps that end up in logs.
"""

from pydantic import BaseModel, Field, SecretStr, model_validator


class Credentials(BaseModel):
    """Base class for all credential types."""

    id: str = Field(default="", description="Identifier in the credential store")
    description: str = Field(default="", description="Human readable description")

    def display_name(self) -> str:
        """Description used in log lines; never contains a secret."""
        return self.description or self.id or self.__class__.__name__


class UsernamePasswordCredentials(Credentials):
    """User name and password (or token) credentials."""

    username: str
    password: SecretStr

    def get_password(self) -> str:
        """Return the plain text password."""
        return self.password.get_secret_value()


class SSHUserPrivateKey(Credentials):
    """SSH private key credentials."""

    username: str = ""
    private_keys: list[str] = Field(default_factory=list)
    passphrase: SecretStr | None = None

    @model_validator(mode="after")
    def validate_private_keys(self) -> "SSHUserPrivateKey":
        """Require at least one key."""
        if not self.private_keys:
            raise ValueError("At least one private key must be provided")
        return self

    def get_passphrase(self) -> str:
        """Return the plain text passphrase, empty when unset."""
        if self.passphrase is None:
            return ""
        return self.passphrase.get_secret_value()
