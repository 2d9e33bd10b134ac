"""Shared FastAPI dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_context
from backend.app.db.context import RequestContext
from backend.app.services import AppServices


def get_services(request: Request) -> AppServices:
    """Service container attached to the app at startup."""
    services: AppServices = request.app.state.services
    return services


async def get_session(
    services: Annotated[AppServices, Depends(get_services)],
) -> AsyncGenerator[AsyncSession, None]:
    """One database session per request."""
    async with services.session_factory() as session:
        yield session


ServicesDep = Annotated[AppServices, Depends(get_services)]
SessionDep = Annotated[AsyncSession, Depends(get_session)]
ContextDep = Annotated[RequestContext, Depends(get_current_context)]
