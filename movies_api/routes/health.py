"""Health check endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from movies_api.config import settings

router = APIRouter(prefix="/v1", tags=["Health"])


@router.get("/health")
async def get_health() -> JSONResponse:
    """
    Health check for monitoring and load balancers.

    Does not touch the database; `db` names the backing movies table.
    """
    return JSONResponse(
        status_code=200,
        content={
            "ok": True,
            "service": settings.service_name,
            "db": settings.dynamodb_table_movies,
            "time": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        },
    )
