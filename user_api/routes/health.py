"""
User Service - Health Check Route
=================================

What:  GET /health for load balancers, compose health checks and monitoring.
How:   Pings the database on every call. No caching: a probe must reflect
       the state of the dependency right now.

Status levels:
    - healthy:    database reachable (HTTP 200)
    - unhealthy:  database unreachable (HTTP 503); the process keeps serving
                  and the next probe checks again
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from user_api.database import Database, get_database
from user_api.schemas.user import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    responses={
        200: {"description": "Database reachable", "model": HealthResponse},
        503: {"description": "Database unreachable", "model": HealthResponse},
    },
    summary="Service health check",
)
async def health_check(db: Database = Depends(get_database)):
    """Report whether the database answers a trivial query."""
    if not await db.ping():
        body = HealthResponse(status="unhealthy", error="Database not reachable")
        return JSONResponse(status_code=503, content=body.model_dump(exclude_none=True))

    return HealthResponse(status="healthy")
