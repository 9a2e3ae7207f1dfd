"""FastAPI dependency injection — the browser session."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from tierfinder.services.session import BrowserSession


async def get_session(request: Request) -> BrowserSession:
    """The session created in the app lifespan."""
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Browser session not initialized",
        )
    return session


async def require_source(session: BrowserSession = Depends(get_session)) -> BrowserSession:
    """Session with a selected source — file operations need a target."""
    if session.navigation.source_id is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No storage source selected",
        )
    return session
