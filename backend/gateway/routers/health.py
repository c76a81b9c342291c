"""
Health check router for liveness and readiness probes.
"""
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status

from gateway.database.connections import ping

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check(request: Request):
    """
    Basic health check endpoint.
    Returns 200 with the process uptime if the API is running.
    """
    started_at = request.app.state.started_at
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "uptime": round(time.monotonic() - started_at, 3),
    }


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness check with dependencies",
)
async def readiness_check(request: Request):
    """
    Readiness check that verifies the MongoDB connection.
    """
    checks = {
        "api": "healthy",
        "mongodb": "unknown",
    }

    client = getattr(request.app.state, "mongo_client", None)
    if client is None:
        checks["mongodb"] = "unhealthy: not connected"
    else:
        try:
            await ping(client)
            checks["mongodb"] = "healthy"
        except Exception as e:
            checks["mongodb"] = f"unhealthy: {str(e)}"

    all_healthy = all(v == "healthy" for v in checks.values())

    return {
        "status": "healthy" if all_healthy else "degraded",
        "checks": checks,
    }
