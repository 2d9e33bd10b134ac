"""Caller identity for owner-scoped requests.

There is no login: the bearer token is the caller's user id. Requests without
an ``Authorization`` header act as the development user.
"""

import uuid
from typing import Annotated

from fastapi import Header, HTTPException, status

from backend.app.db.context import RequestContext

DEV_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")

_BEARER_PREFIX = "Bearer "


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def parse_bearer_user_id(authorization: str) -> uuid.UUID:
    """User id carried by a ``Bearer <uuid>`` header.

    Raises:
        HTTPException: 401 if the header is not a bearer token or the token is not a UUID
    """
    if not authorization.startswith(_BEARER_PREFIX):
        raise _unauthorized("Invalid authorization header format")

    token = authorization.removeprefix(_BEARER_PREFIX).strip()
    try:
        return uuid.UUID(token)
    except ValueError as e:
        raise _unauthorized("Invalid bearer token (expected user id)") from e


async def get_current_context(
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Request context for the caller (development user when unauthenticated)."""
    if not authorization:
        return RequestContext(user_id=DEV_USER_ID)
    return RequestContext(user_id=parse_bearer_user_id(authorization))
