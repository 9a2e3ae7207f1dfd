"""Health check."""

from fastapi import APIRouter, Request

from tierfinder import __version__
from tierfinder.config import settings
from tierfinder.schemas.system import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Lightweight status check, works before the session is ready."""
    session = getattr(request.app.state, "session", None)
    return HealthResponse(
        version=__version__,
        mode=settings.mode,
        sources=len(session.sources) if session else 0,
        active_jobs=session.jobs.active_count if session else 0,
    )


@router.get("/ping")
async def ping():
    """Ultra-lightweight ping."""
    return {"status": "ok"}
