"""
api/routes/auth.py -- Login and logout endpoints.

Routes:
  POST /login   -- password login; returns a bearer token in the JSON body
  POST /logout  -- forgets the caller's registered token (requires auth)

Security:
  Login responses carry Cache-Control: no-store so proxies never cache tokens.
  The flow in auth/flows.py does the work; handlers only unpack the request
  and shape the response. Failures surface as core.errors.AppError and are
  rendered by the handler in api/main.py.

Handlers are plain def (not async): bcrypt and the store are blocking, and
FastAPI runs sync handlers in its threadpool.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from api.models import LoginRequest, LoginResponse, StatusMessage
from auth import flows
from auth.dependencies import get_current_identity
from auth.models import UserIdentity

# Auth policy:
# - POST /login:   public -- login endpoint must be unauthenticated
# - POST /logout:  requires auth (get_current_identity)
router = APIRouter()


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={400: {"description": "Missing required field"}, 401: {"description": "Invalid credentials"}},
)
def login(request: Request, response: Response, body: Optional[LoginRequest] = None) -> LoginResponse:
    """Authenticate with username and password and receive a JWT."""
    body = body or LoginRequest()
    token = flows.login(request.app.state.user_store, request.app.state.sessions, body.username, body.password)
    response.headers["Cache-Control"] = "no-store"
    return LoginResponse(token=token)


@router.post("/logout", response_model=StatusMessage, responses={401: {"description": "Token not provided"}})
def logout(request: Request, identity: UserIdentity = Depends(get_current_identity)) -> StatusMessage:
    """Clear the caller's session registry entry."""
    flows.logout(request.app.state.sessions, identity)
    return StatusMessage(message="Logged out")
