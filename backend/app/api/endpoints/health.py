"""
Health check endpoints.
"""

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.dependencies import DBSession
from app.core.exceptions import DatabaseUnavailableError

router = APIRouter()


@router.get("")
async def health_check() -> dict:
    """Health check básico."""
    return {
        "status": "healthy",
        "version": settings.VERSION,
    }


@router.get("/ready")
async def readiness_check(db: DBSession) -> dict:
    """
    Readiness check.

    Verifica se o banco responde antes de receber tráfego.
    """
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        raise DatabaseUnavailableError(str(e)) from e

    return {
        "status": "ready",
        "checks": {
            "database": "ok",
        },
    }
