import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from miniapp.core.database import ping
from miniapp.models import HealthResponse, ReadyResponse

router = APIRouter(tags=["health"])
logger = logging.getLogger("miniapp")


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(ok=True)


@router.get(
    "/ready",
    response_model=ReadyResponse,
    responses={503: {"model": ReadyResponse, "description": "Database unreachable"}},
)
def ready():
    try:
        ping()
    except SQLAlchemyError as e:
        logger.warning("readiness check failed: %s", e)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=ReadyResponse(ready=False, reason="database unreachable").model_dump(),
        )
    return ReadyResponse(ready=True)
