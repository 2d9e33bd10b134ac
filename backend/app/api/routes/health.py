"""Health check endpoints.

- /health: liveness, always 200 while the process is up
- /healthz: readiness, checks database connectivity
"""

import logging
from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from backend.app.api.deps import ServicesDep
from backend.app.db.engine import ping

logger = logging.getLogger(__name__)

router = APIRouter()


async def check_db(services: ServicesDep) -> tuple[bool, str]:
    """Check database connectivity.

    Returns:
        (is_ok, status_message)
    """
    try:
        await ping(services.session_factory)
        return (True, "ok")
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return (False, f"error: {type(e).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz(services: ServicesDep) -> dict[str, Any] | JSONResponse:
    """Readiness check.

    Returns:
        200 with component status if the database is reachable
        503 otherwise
    """
    db_ok, db_status = await check_db(services)

    response_body = {
        "status": "ok" if db_ok else "degraded",
        "components": {
            "db": db_status,
            "extraction_tasks": services.task_runner.pending,
        },
    }

    if not db_ok:
        return JSONResponse(content=response_body, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    return response_body
