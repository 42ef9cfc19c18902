"""Unit tests for auth/flows.py -- login/logout orchestration with fake collaborators.

Covers:
- missing or empty username/password -> ValidationError naming the field
- store failure -> UpstreamError("Login failed"), nothing recorded, no retry
- successful login records the issued token in the registry
- failed login leaves the registry untouched
- logout clears only the caller's entry
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from auth import flows
from auth.models import User, UserIdentity
from auth.sessions import SessionRegistry
from auth.tokens import hash_password, verify_access_token
from core.errors import AuthenticationError, UpstreamError, ValidationError

_HASH = hash_password("correct")


def _store(user: User | None = None) -> MagicMock:
    store = MagicMock()
    store.get_by_username.return_value = user
    return store


def _john() -> User:
    return User(id=5, username="johndoe", hashed_password=_HASH, fullname="John Doe", lastname="Doe")


@pytest.mark.parametrize(
    ("username", "password", "missing"),
    [
        (None, "correct", "username"),
        ("", "correct", "username"),
        ("johndoe", None, "password"),
        ("johndoe", "", "password"),
        (None, None, "username"),
    ],
)
def test_missing_fields(username, password, missing) -> None:
    store = _store(_john())
    with pytest.raises(ValidationError) as excinfo:
        flows.login(store, SessionRegistry(), username, password)
    assert excinfo.value.status_code == 400
    assert excinfo.value.to_dict() == {"error": f"Missing required field: {missing}"}
    store.get_by_username.assert_not_called()


def test_store_failure_is_upstream_error() -> None:
    store = MagicMock()
    store.get_by_username.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
    sessions = SessionRegistry()

    with pytest.raises(UpstreamError) as excinfo:
        flows.login(store, sessions, "johndoe", "correct")

    assert excinfo.value.status_code == 500
    assert excinfo.value.to_dict() == {"error": "Login failed"}
    assert "connection refused" not in excinfo.value.message
    assert store.get_by_username.call_count == 1
    assert len(sessions) == 0


def test_successful_login_records_token() -> None:
    sessions = SessionRegistry()
    token = flows.login(_store(_john()), sessions, "johndoe", "correct")
    assert sessions.get(5) == token
    assert verify_access_token(token) == UserIdentity(id=5, fullname="John Doe", lastname="Doe")


def test_failed_login_leaves_registry_alone() -> None:
    sessions = SessionRegistry()
    sessions.set(5, "earlier-token")
    with pytest.raises(AuthenticationError):
        flows.login(_store(_john()), sessions, "johndoe", "wrong")
    assert sessions.get(5) == "earlier-token"


def test_identity_uses_empty_strings_for_missing_names() -> None:
    user = User(id=9, username="nonames", hashed_password=_HASH)
    token = flows.login(_store(user), SessionRegistry(), "nonames", "correct")
    assert verify_access_token(token) == UserIdentity(id=9, fullname="", lastname="")


def test_logout_clears_only_caller() -> None:
    sessions = SessionRegistry()
    sessions.set(5, "tok-5")
    sessions.set(6, "tok-6")
    flows.logout(sessions, UserIdentity(id=5, fullname="John Doe", lastname="Doe"))
    assert sessions.get(5) is None
    assert sessions.get(6) == "tok-6"


def test_logout_without_entry_is_fine() -> None:
    sessions = SessionRegistry()
    flows.logout(sessions, UserIdentity(id=5, fullname="John Doe", lastname="Doe"))
    assert len(sessions) == 0
