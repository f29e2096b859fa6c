"""
Authentication for a single call.

A call either relies on the session token held in the client config
(TokenAuth, obtained with NetApiClient.login) or carries credentials inline
(Credentials), in which case the backend authenticates that one request
and no session is created.
"""

from dataclasses import dataclass
from enum import Enum


class AuthModule(str, Enum):
    """External authentication (eauth) backends supported by Salt."""

    AUTO = "auto"
    PAM = "pam"
    LDAP = "ldap"
    DJANGO = "django"
    FILE = "file"
    KEYSTONE = "keystone"
    MYSQL = "mysql"
    REST = "rest"
    SHAREDSECRET = "sharedsecret"
    YUBICO = "yubico"


@dataclass(frozen=True)
class TokenAuth:
    """Use the session token from the client config."""


@dataclass(frozen=True)
class Credentials:
    """Inline username/password authentication for one request."""

    username: str
    password: str
    eauth: AuthModule = AuthModule.AUTO

    def to_payload(self) -> dict[str, str]:
        return {
            "username": self.username,
            "password": self.password,
            "eauth": AuthModule(self.eauth).value,
        }

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, eauth={AuthModule(self.eauth).value!r})"


AuthContext = TokenAuth | Credentials
