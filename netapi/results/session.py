"""
Values returned by the session and server endpoints (/login, /stats).
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Token:
    """Session token issued by POST /login."""

    token: str
    start: float | None = None
    expire: float | None = None
    user: str | None = None
    eauth: str | None = None
    perms: list[Any] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Token(user={self.user!r}, eauth={self.eauth!r}, expire={self.expire!r})"


@dataclass(frozen=True)
class Stats:
    """CherryPy server statistics from GET /stats."""

    applications: dict[str, Any] = field(default_factory=dict)
    server: dict[str, Any] = field(default_factory=dict)
