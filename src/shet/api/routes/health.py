"""Health check endpoints."""

from fastapi import APIRouter

from shet import __version__
from shet.config import get_settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "shet"}


@router.get("/health/detailed")
async def detailed_health():
    """Detailed health check with configuration info."""
    settings = get_settings()
    return {
        "status": "healthy",
        "service": "shet",
        "version": __version__,
        "config": settings.get_safe_dict(),
    }
