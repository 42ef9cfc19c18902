"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and routes do
the work; these only own the domain shape.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A credential record in the users table.

    hashed_password is always a bcrypt hash -- plaintext never reaches this
    dataclass. id is None before the record is written to the database.
    """

    username: str
    hashed_password: str
    firstname: str | None = None
    fullname: str | None = None
    lastname: str | None = None
    status: str = "active"  # "active" | "inactive"
    id: int | None = None
    created_at: str | None = None

    def identity(self) -> UserIdentity:
        """Return the claim set embedded in tokens issued for this user."""
        return UserIdentity(id=self.id, fullname=self.fullname or "", lastname=self.lastname or "")


@dataclass(frozen=True)
class UserIdentity:
    """The identity claims carried inside a bearer token.

    Frozen: once a token is verified its claims are attached to the request
    and must not be altered downstream. The referenced user may have been
    deleted since issuance; nothing here re-checks the store.
    """

    id: int
    fullname: str
    lastname: str
