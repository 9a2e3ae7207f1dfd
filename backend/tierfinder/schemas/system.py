"""System status schemas."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    version: str
    service: str = "tierfinder"
    mode: str = "dev"
    sources: int = 0
    active_jobs: int = 0
