"""Health Endpoint"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_db, health_check


router = APIRouter()


@router.get("/health")
async def health(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    database_ok = await health_check(db)
    return JSONResponse(
        status_code=status.HTTP_200_OK if database_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "success" if database_ok else "error",
            "service": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
            "database": "ok" if database_ok else "unavailable",
        },
    )
