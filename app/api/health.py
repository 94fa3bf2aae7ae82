"""Health check endpoint"""

from fastapi import APIRouter
from datetime import datetime, timezone

from app.core.config import settings
from app.core.database import check_db

router = APIRouter()

@router.get("/health", tags=["Health"])
async def health_check():
    """Liveness plus a database ping"""
    database_ok = await check_db()
    return {
        "status": "healthy" if database_ok else "degraded",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "database": "connected" if database_ok else "unavailable",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
