"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from src.cobalt_cms.api.http.app_data import ApplicationDependencies
from src.cobalt_cms.api.http.deps import get_app_dependencies
from src.cobalt_cms.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe: 200 OK as long as the process is running."""
    return {"status": "healthy", "service": "cobalt-cms"}


@router.get("/ready", response_model=None)
async def readiness(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> dict[str, Any] | JSONResponse:
    """Readiness probe.

    The database is critical (503 when unreachable); session storage is not,
    since it falls back to memory.
    """
    config = get_config()
    db_healthy = app_deps.database_service.health_check()
    checks = {
        "database": {
            "status": "healthy" if db_healthy else "unhealthy",
            "type": "sqlite" if config.database.is_sqlite else "postgresql",
        },
        "session_storage": {
            "status": "healthy" if app_deps.session_storage.is_available() else "degraded",
            "type": type(app_deps.session_storage).__name__,
        },
    }

    body = {"status": "ready" if db_healthy else "not_ready", "checks": checks}
    if not db_healthy:
        return JSONResponse(status_code=503, content=body)
    return body
