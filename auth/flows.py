"""
auth/flows.py -- Login and logout orchestration.

login():  validate input -> store lookup -> bcrypt verify -> mint token ->
          record it in the session registry.
logout(): drop the registry entry for an already-authenticated identity.

Both take their collaborators as arguments (store, sessions) so the route
layer decides which instances to use and tests can pass fakes.

Error translation happens here, at the flow boundary: any SQLAlchemyError from
the store becomes UpstreamError("Login failed") after being logged. Nothing is
retried -- a failed lookup or password check is reported immediately.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from auth.tokens import authenticate_user, create_access_token
from core.errors import UpstreamError, require_fields

if TYPE_CHECKING:
    from auth.models import UserIdentity
    from auth.sessions import SessionRegistry
    from auth.store import UserStore

logger = logging.getLogger("usermgmt.auth")


def login(store: UserStore, sessions: SessionRegistry, username: str | None, password: str | None) -> str:
    """Authenticate a username/password pair and return a fresh bearer token.

    Raises:
        ValidationError:     username or password missing/empty (400).
        NotFoundError:       no user with that username (401).
        AuthenticationError: password does not match (401).
        UpstreamError:       the credential store failed (500).
    """
    require_fields({"username": username, "password": password}, ["username", "password"])

    try:
        user = authenticate_user(store, username, password)
    except SQLAlchemyError as exc:
        logger.exception("Credential lookup failed during login")
        raise UpstreamError("Login failed") from exc

    token = create_access_token(user.identity())
    # Registry is touched only after the slow work (DB + bcrypt) is done.
    sessions.set(user.id, token)
    logger.info("Login succeeded for user id %d", user.id)
    return token


def logout(sessions: SessionRegistry, identity: UserIdentity) -> None:
    """Forget the registered token for this identity.

    The bearer token itself is not revoked unless the auth gate runs with
    enforce_sessions enabled; otherwise it remains valid until expiry.
    """
    sessions.clear(identity.id)
    logger.info("Logout for user id %d", identity.id)
