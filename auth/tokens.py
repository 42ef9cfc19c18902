"""
auth/tokens.py -- Password hashing, JWT issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with JWT_SECRET and carry
       the user's id, fullname and lastname plus iat/exp and a random jti.
       Lifetime is Settings.token_expire_seconds (1 hour). There is no refresh
       mechanism -- clients log in again after expiry.

  Verification raises TokenMissingError / TokenInvalidError rather than
       returning None, so the auth gate can map each to its own status code
       (401 vs 403). Verified claims are trusted as of issuance time; the
       store is not re-queried.

  Passwords: bcrypt used directly. The cost factor comes from
       Settings.bcrypt_rounds (default 10). The _DUMMY_HASH constant enables
       timing equalization in authenticate_user() so response time does not
       reveal whether a username exists.

  JWT_SECRET: sourced from core.config.get_settings(). A missing secret fails
       Settings validation at import time, i.e. at startup, never per request.

Layer rule: no imports from api/. Import from core/ is allowed -- core/ is the
kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

from auth.models import UserIdentity
from core.config import get_settings
from core.errors import AuthenticationError, NotFoundError, TokenInvalidError, TokenMissingError

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

logger = logging.getLogger("usermgmt.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


# bcrypt only reads the first 72 bytes; bcrypt>=5 raises on longer input.
_BCRYPT_MAX_BYTES = 72


def _password_bytes(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    Two calls with the same input return different strings because
    gensalt() draws a fresh random salt each time.

    Only the first 72 UTF-8 bytes take part in the hash. verify_password()
    truncates the same way, so a long or multibyte password still verifies.
    """
    salt = bcrypt.gensalt(rounds=_settings.bcrypt_rounds)
    return bcrypt.hashpw(_password_bytes(plain), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    Never raises: a malformed or empty hash is a mismatch.
    """
    try:
        return bcrypt.checkpw(_password_bytes(plain), hashed.encode("utf-8"))
    except Exception:
        return False


# Timing equalization dummy hash.
# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("usermgmt_timing_dummy")


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(identity: UserIdentity, now: datetime | None = None) -> str:
    """Encode a signed JWT for the given identity.

    Args:
        identity: Claims of a user whose credentials the caller has already
                  verified. Nothing is re-validated here.
        now:      Issue time. Defaults to the current UTC time; tests pass a
                  past time to exercise the expiry boundary.
    """
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(identity.id),
        "id": identity.id,
        "fullname": identity.fullname,
        "lastname": identity.lastname,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=_settings.token_expire_seconds),
        "jti": secrets.token_hex(16),
    }
    return jwt.encode(payload, _settings.jwt_secret, algorithm=_ALGORITHM)


def verify_access_token(token: str | None) -> UserIdentity:
    """Verify signature and expiry of a token and return its identity claims.

    Raises:
        TokenMissingError: token is None or empty.
        TokenInvalidError: bad signature, expired, or claims of the wrong shape.
    """
    if not token:
        raise TokenMissingError()
    try:
        payload = jwt.decode(token, _settings.jwt_secret, algorithms=[_ALGORITHM])
    except JWTError as exc:
        raise TokenInvalidError() from exc

    user_id = payload.get("id")
    fullname = payload.get("fullname")
    lastname = payload.get("lastname")
    # bool is an int subclass; a token claiming id=True is not ours.
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise TokenInvalidError()
    if not isinstance(fullname, str) or not isinstance(lastname, str):
        raise TokenInvalidError()
    return UserIdentity(id=user_id, fullname=fullname, lastname=lastname)


# ---------------------------------------------------------------------------
# User authentication (constant-time)
# ---------------------------------------------------------------------------


def authenticate_user(store: UserStore, username: str, password: str) -> User:
    """Check a username/password pair against the store with timing equalization.

    Always runs bcrypt whether or not the user exists:
    - Unknown username: bcrypt runs against _DUMMY_HASH (same cost as real check)
    - Wrong password: bcrypt runs against the real hash (same cost)

    The two failures still carry distinct messages ("User not found" vs
    "Invalid password") because API clients depend on them.

    Store errors propagate unchanged; the login flow translates them.
    """
    user = store.get_by_username(username)
    if user is None:
        # Equalize timing -- do NOT return early before running bcrypt
        verify_password(password, _DUMMY_HASH)
        raise NotFoundError("User not found", status_code=401, body_key="error")
    if not verify_password(password, user.hashed_password):
        raise AuthenticationError("Invalid password")
    return user
