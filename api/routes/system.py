"""
api/routes/system.py -- Public service endpoints: landing page, DB ping, CORS probe.

GET /health lives in api/main.py so it stays reachable whatever the router
registration state.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.exc import SQLAlchemyError

from api.models import MessageResponse, PingResponse
from core.errors import UpstreamError

logger = logging.getLogger("usermgmt.api")

router = APIRouter()

_LANDING_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>User Management Service</title>
</head>
<body>
  <h1>User Management API</h1>
  <p>User management and authentication service.</p>
  <ul>
    <li><a href="/api-docs">API documentation</a></li>
    <li><a href="/health">Health check</a></li>
  </ul>
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def landing() -> HTMLResponse:
    return HTMLResponse(_LANDING_PAGE)


@router.get("/ping", response_model=PingResponse)
def ping(request: Request) -> PingResponse:
    """Return the database server time to verify connectivity."""
    try:
        now = request.app.state.user_store.server_time()
    except SQLAlchemyError as exc:
        logger.exception("Database ping failed")
        raise UpstreamError("Database error") from exc
    return PingResponse(time=now)


@router.get("/api/data", response_model=MessageResponse)
def cors_probe() -> MessageResponse:
    """Fixed payload for checking CORS configuration from a browser."""
    return MessageResponse(message="Hello, CORS!")
