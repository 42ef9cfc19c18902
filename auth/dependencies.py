"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication (the auth gate).

Per request the gate ends in one of two states:
  AUTHENTICATED  the UserIdentity is returned to the route and also stored on
                 request.state.identity for middleware/logging.
  REJECTED       TokenMissingError (401 "Token not provided") when there is no
                 well-formed "Authorization: Bearer <token>" header, or
                 TokenInvalidError (403 "Invalid or expired token") when the
                 token fails verification.

A malformed header is treated exactly like a missing one. The gate never
falls back to letting a request through.

Session enforcement: by default a verified token is accepted on signature and
expiry alone, so logout does not revoke it. With enforce_sessions the gate
also requires the token to be the one the session registry holds for that
user; after logout (or a newer login) the old token gets 403.

Layer rule: may import from fastapi because this module is part of the FastAPI
dependency injection system. No imports from api/.
"""

from fastapi import Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth.models import UserIdentity
from auth.tokens import verify_access_token
from core.config import get_settings
from core.errors import TokenInvalidError

# Registered only so the OpenAPI schema documents the bearer scheme. Its
# parsing is more lenient than ours, so the value it extracts is ignored.
_bearer_scheme = HTTPBearer(auto_error=False, description="JWT from POST /login")


def bearer_token(request: Request) -> str | None:
    """Return the token from an "Authorization: Bearer <token>" header, else None.

    Any other shape -- no header, another scheme, no token, extra parts --
    yields None.
    """
    parts = request.headers.get("Authorization", "").split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


class AuthGate:
    """Callable dependency that authenticates a request or raises.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(identity: UserIdentity = Depends(get_current_identity)): ...

    enforce_sessions=None reads Settings.enforce_sessions at request time.
    """

    def __init__(self, enforce_sessions: bool | None = None) -> None:
        self.enforce_sessions = enforce_sessions

    def __call__(
        self,
        request: Request,
        _credentials: HTTPAuthorizationCredentials | None = Security(_bearer_scheme),
    ) -> UserIdentity:
        token = bearer_token(request)
        identity = verify_access_token(token)

        enforce = self.enforce_sessions
        if enforce is None:
            enforce = get_settings().enforce_sessions
        if enforce and not request.app.state.sessions.matches(identity.id, token):
            raise TokenInvalidError()

        request.state.identity = identity
        return identity


get_current_identity = AuthGate()
