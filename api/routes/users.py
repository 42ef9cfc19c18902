"""
api/routes/users.py -- User CRUD endpoints.

Routes:
  GET    /users         -- list users (id and names only)       [auth]
  GET    /users/{id}    -- one user, without the password hash  [auth]
  POST   /users         -- create a user (public registration)
  PUT    /users/{id}    -- update names and/or password         [auth]
  DELETE /users/{id}    -- delete a user                        [auth]

Passwords are hashed with auth.tokens.hash_password() before they reach the
store. Store failures are logged here and surfaced as UpstreamError with a
short generic message; driver details never reach the client.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from api.models import MessageResponse, UserCreate, UserResponse, UserSummaryRow, UserUpdate
from auth.dependencies import get_current_identity
from auth.models import User
from auth.store import UserStore
from auth.tokens import hash_password
from core.errors import ConflictError, NotFoundError, UpstreamError, ValidationError, require_fields

logger = logging.getLogger("usermgmt.api")

router = APIRouter()

_protected = [Depends(get_current_identity)]


@contextmanager
def _store_errors(message: str) -> Iterator[None]:
    """Translate SQLAlchemy failures into UpstreamError(message)."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("User store failure (%s)", message)
        raise UpstreamError(message) from exc


def _user_not_found() -> NotFoundError:
    return NotFoundError("User not found")


@router.get("/users", response_model=list[UserSummaryRow], dependencies=_protected)
def list_users(request: Request) -> list[UserSummaryRow]:
    """List every user's id and names."""
    store: UserStore = request.app.state.user_store
    with _store_errors("Query failed"):
        users = store.list_users()
    return [UserSummaryRow(id=u.id, firstname=u.firstname, fullname=u.fullname, lastname=u.lastname) for u in users]


@router.get("/users/{user_id}", response_model=UserResponse, dependencies=_protected)
def get_user(request: Request, user_id: int) -> UserResponse:
    store: UserStore = request.app.state.user_store
    with _store_errors("Query failed"):
        user = store.get_by_id(user_id)
    if user is None:
        raise _user_not_found()
    return UserResponse.from_user(user)


@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(request: Request, body: UserCreate) -> UserResponse:
    """Create a user account. Open to unauthenticated callers (self-registration)."""
    store: UserStore = request.app.state.user_store

    if not body.password:
        raise ValidationError("Password is required")
    require_fields({"username": body.username}, ["username"])

    user = User(
        firstname=body.firstname,
        fullname=body.fullname,
        lastname=body.lastname,
        username=body.username,
        hashed_password=hash_password(body.password),
        status=body.status.value,
    )
    try:
        user.id = store.create_user(user)
    except IntegrityError as exc:
        raise ConflictError("A user with that username already exists") from exc
    except SQLAlchemyError as exc:
        logger.exception("User store failure (Insert failed)")
        raise UpstreamError("Insert failed") from exc

    logger.info("Created user id %d", user.id)
    return UserResponse.from_user(user)


@router.put("/users/{user_id}", response_model=MessageResponse, dependencies=_protected)
def update_user(request: Request, user_id: int, body: UserUpdate) -> MessageResponse:
    """Update a user's names and optionally their password. Unsent fields are left alone."""
    store: UserStore = request.app.state.user_store

    updates = body.model_dump(exclude_unset=True, exclude_none=True)
    if "password" in updates:
        updates["hashed_password"] = hash_password(updates.pop("password"))
    if not updates:
        raise ValidationError("No fields to update")

    with _store_errors("Update failed"):
        updated = store.update_user(user_id, **updates)
    if not updated:
        raise _user_not_found()
    return MessageResponse(message="User updated successfully")


@router.delete("/users/{user_id}", response_model=MessageResponse, dependencies=_protected)
def delete_user(request: Request, user_id: int) -> MessageResponse:
    """Delete a user. Tokens already issued to them stay valid until expiry."""
    store: UserStore = request.app.state.user_store
    with _store_errors("Delete failed"):
        deleted = store.delete_user(user_id)
    if not deleted:
        raise _user_not_found()
    logger.info("Deleted user id %d", user_id)
    return MessageResponse(message="User deleted")
